"""
Containers used while rendering a demangled name.
"""

from typing import Iterator

from arm_demangler.errors import BackReferenceOutOfRange


class TokenBuilder:
    """
    Ordered list of rendered text fragments.

    Fragments are only ever appended, removed from the end, or copied out;
    the rendered text is the concatenation of every fragment in order.
    """

    def __init__(self):
        self._fragments: list[str] = []

    def append(self, text: str):
        self._fragments.append(text)

    def pop_last(self) -> str:
        """
        Remove the most recently appended fragment and return it.
        """
        if not self._fragments:
            raise IndexError("pop from empty TokenBuilder")
        return self._fragments.pop()

    def extract(self, start: int, end: int) -> str:
        """
        Flatten the fragments from index `start` to index `end`, both inclusive.
        """
        if start < 0 or end >= len(self._fragments) or start > end + 1:
            raise IndexError(f"Fragment range [{start}, {end}] out of bounds")
        return "".join(self._fragments[start : end + 1])

    def flatten(self) -> str:
        return "".join(self._fragments)

    def __len__(self) -> int:
        return len(self._fragments)

    def __str__(self) -> str:
        return self.flatten()


class ArgumentTable:
    """
    Append-only table of rendered argument types, for `T` and `N` back-references.

    Lookups are 1-based to match the indices used in mangled names.
    """

    def __init__(self):
        self._entries: list[str] = []

    def record(self, text: str):
        self._entries.append(text)

    def get(self, index: int) -> str:
        """
        Return the argument recorded at 1-based position `index`.
        """
        if not 1 <= index <= len(self._entries):
            raise BackReferenceOutOfRange(
                f"Invalid index {index} for back-referenced argument "
                f"({len(self._entries)} recorded)"
            )
        return self._entries[index - 1]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)
