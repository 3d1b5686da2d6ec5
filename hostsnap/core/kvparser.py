"""Parser for colon-delimited ``key: value`` text such as /proc/cpuinfo."""

import re
from collections.abc import Iterable, Iterator

# Split on the first colon, swallowing whitespace on either side
_SEPARATOR = re.compile(r"\s*:\s*")


class MultiMap:
    """
    Ordered mapping from key to every value recorded for it.

    Unlike a dict, adding a value for an existing key appends instead of
    replacing. Keys keep first-seen order and values keep insertion order.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = ()):
        self._data: dict[str, list[str]] = {}
        for key, value in pairs:
            self.add(key, value)

    def add(self, key: str, value: str) -> None:
        self._data.setdefault(key, []).append(value)

    def get(self, key: str) -> list[str]:
        """Return a copy of the values for ``key`` (empty if absent)."""
        return list(self._data.get(key, ()))

    def count(self, key: str) -> int:
        return len(self._data.get(key, ()))

    def keys(self) -> list[str]:
        return list(self._data)

    def items(self) -> Iterator[tuple[str, str]]:
        """Iterate over every (key, value) pair, duplicates included."""
        for key, values in self._data.items():
            for value in values:
                yield key, value

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __bool__(self) -> bool:
        return bool(self._data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MultiMap):
            return NotImplemented
        return self._data == other._data

    def __repr__(self) -> str:
        return f"MultiMap({self._data!r})"


def parse_key_value_lines(lines: Iterable[str]) -> MultiMap:
    """
    Parse ``key: value`` lines into a MultiMap.

    Each line is split on its first colon (with surrounding whitespace).
    The pair is kept only when both the key and the value are non-empty;
    anything else is skipped without complaint. A key may repeat, and every
    occurrence is retained.

    Args:
        lines: Iterable of text lines (file object, list, generator...)

    Returns:
        MultiMap of parsed pairs

    Examples:
        >>> parse_key_value_lines(["processor\\t: 0", "processor\\t: 1"]).get("processor")
        ['0', '1']
        >>> len(parse_key_value_lines(["no separator here", ": orphan value"]))
        0
    """
    result = MultiMap()
    for line in lines:
        parts = _SEPARATOR.split(line.rstrip("\r\n"), maxsplit=1)
        if len(parts) == 2 and parts[0] and parts[1]:
            result.add(parts[0], parts[1])
    return result


def parse_key_value_text(text: str) -> MultiMap:
    """Parse a whole block of ``key: value`` text."""
    return parse_key_value_lines(text.splitlines())
