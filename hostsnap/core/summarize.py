"""Reduce multi-valued fields to a single display string."""

from .kvparser import MultiMap

# Rendering for a key with no values at all
NONE_TOKEN = "none"

# Separator between distinct values, e.g. "{2 | 4}"
VALUE_DELIMITER = " | "


def summarize(values: MultiMap, key: str) -> str:
    """
    Summarize every value recorded for ``key`` as one string.

    - No values: ``NONE_TOKEN``.
    - Exactly one occurrence: that value, unchanged.
    - Several occurrences: the distinct values as ``{a | b}`` in first-seen
      order, even when they are all equal (``{4}``).

    Examples:
        >>> m = MultiMap([("cpu cores", "4")])
        >>> summarize(m, "cpu cores")
        '4'
        >>> m.add("cpu cores", "4")
        >>> summarize(m, "cpu cores")
        '{4}'
        >>> m.add("cpu cores", "2")
        >>> summarize(m, "cpu cores")
        '{4 | 2}'
        >>> summarize(m, "cache size")
        'none'
    """
    occurrences = values.get(key)
    if not occurrences:
        return NONE_TOKEN
    if len(occurrences) == 1:
        return occurrences[0]
    distinct = list(dict.fromkeys(occurrences))
    return "{" + VALUE_DELIMITER.join(distinct) + "}"
