"""Immutable, case-insensitive request headers.

Built from the raw ``(name, value)`` byte pairs of an ASGI scope.  Names
are lowercased once at construction; values are decoded as latin-1.
"""

from collections.abc import Iterable, Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only header mapping.

    ``headers["Upgrade"]`` returns the first value; ``get_list`` returns
    every value sent under that name.
    """

    __slots__ = ("_pairs",)

    def __init__(self, raw: Iterable[tuple[bytes, bytes]] = ()) -> None:
        self._pairs: tuple[tuple[str, str], ...] = tuple(
            (name.decode("latin-1").lower(), value.decode("latin-1")) for name, value in raw
        )

    def __getitem__(self, key: str) -> str:
        wanted = key.lower()
        for name, value in self._pairs:
            if name == wanted:
                return value
        raise KeyError(key)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, str):
            return False
        wanted = key.lower()
        return any(name == wanted for name, _ in self._pairs)

    def __iter__(self) -> Iterator[str]:
        # dict.fromkeys keeps first-seen order while dropping repeats
        return iter(dict.fromkeys(name for name, _ in self._pairs))

    def __len__(self) -> int:
        return len(dict.fromkeys(name for name, _ in self._pairs))

    def __repr__(self) -> str:
        return f"Headers({list(self._pairs)!r})"

    def get_list(self, key: str) -> list[str]:
        """Return all values for *key*, in the order they were sent."""
        wanted = key.lower()
        return [value for name, value in self._pairs if name == wanted]
