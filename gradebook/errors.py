"""Error taxonomy for grade aggregation.

"No grade yet" is never an error: it is reported as ``None`` by the
aggregation functions and must stay distinguishable from a computed 0%.
"""


class GradingError(Exception):
    """Base class for all gradebook errors."""


class ValidationError(GradingError, ValueError):
    """Malformed input: an item, category, scale entry or raw record."""

    def __init__(self, message, item_id=None):
        super().__init__(message)
        self.item_id = item_id


class ScaleLookupError(GradingError, LookupError):
    """A percentage matched no band of the configured grading scale."""

    def __init__(self, message, percentage=None):
        super().__init__(message)
        self.percentage = percentage
