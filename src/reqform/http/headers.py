"""src/reqform/http/headers.py

Ordered, case-insensitive HTTP request header management for Reqform.
"""

from typing import (
    Dict,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    Union,
)

from reqform.utils.validators import validate_header

__all__ = ["Headers"]


class Headers(MutableMapping[str, str]):
    """
    Case-insensitive dictionary for HTTP request headers.

    Names keep the spelling they were first set with and iterate in insertion
    order. Repeated ``add()`` calls accumulate values, which read back joined by
    commas. Assignment replaces every existing value for the name.
    Access raw lists via get_all().
    """

    __slots__ = ("_headers",)

    def __init__(
        self, headers: Optional[Mapping[str, Union[str, List[str]]]] = None
    ) -> None:
        self._headers: Dict[str, Tuple[str, List[str]]] = {}
        if headers:
            for k, v in headers.items():
                # Support both single values and lists
                for value in v if isinstance(v, list) else [v]:
                    self.add(k, value)

    def __getitem__(self, key: str) -> str:
        """Get header value (comma-joined if multiple)."""
        entry = self._headers.get(key.lower())
        if entry is None:
            raise KeyError(key)
        return ", ".join(entry[1])

    def __setitem__(self, key: str, value: str) -> None:
        """Replace all values for a header."""
        validate_header(key, value)
        self._headers.pop(key.lower(), None)
        self._headers[key.lower()] = (key, [value])

    def __delitem__(self, key: str) -> None:
        del self._headers[key.lower()]

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._headers.values())

    def __len__(self) -> int:
        return len(self._headers)

    def __repr__(self) -> str:
        return f"Headers({dict(self.items())!r})"

    def add(self, key: str, value: str) -> None:
        """
        Append a value for a header, keeping existing values.

        Raises:
            ValueError: If the name or value contains CR, LF or NUL.
        """
        validate_header(key, value)
        entry = self._headers.get(key.lower())
        if entry is None:
            self._headers[key.lower()] = (key, [value])
        else:
            entry[1].append(value)

    def get_all(self, key: str) -> List[str]:
        """
        Get all values of a header.

        Args:
            key: Header name (case-insensitive).

        Returns:
            List of all values for the header, empty list if not found.
        """
        entry = self._headers.get(key.lower())
        return list(entry[1]) if entry else []

    def copy(self) -> "Headers":
        """Return an independent copy."""
        clone = Headers()
        for lowered, (name, values) in self._headers.items():
            clone._headers[lowered] = (name, list(values))
        return clone

    def to_dict(self) -> Dict[str, str]:
        """Return a plain dict of name to (comma-joined) value."""
        return dict(self.items())
