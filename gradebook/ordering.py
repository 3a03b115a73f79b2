"""Order-statistics helpers."""


def drop_lowest(values, count, key=None):
    """
    Split ``values`` into (kept, dropped), dropping the ``count`` lowest by ``key``.

    At least one value is always kept, whatever ``count`` asks for. The sort
    is stable, so ``key`` should break ties itself when order matters.
    Returns two lists; ``kept`` stays in ascending key order.
    """
    ordered = sorted(values, key=key)
    if not ordered:
        return [], []
    k = max(0, min(int(count or 0), len(ordered) - 1))
    return ordered[k:], ordered[:k]
