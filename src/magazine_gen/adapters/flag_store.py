"""In-memory element flag storage for navigation controllers."""

from __future__ import annotations

from collections.abc import Hashable, Iterable


class InMemoryFlagStore:
    """Keeps `active`/`prev` flags per opaque element handle."""

    def __init__(self) -> None:
        self._flags: dict[Hashable, set[str]] = {}

    def set_flag(self, element: Hashable, flag: str) -> None:
        self._flags.setdefault(element, set()).add(flag)

    def clear_flag(self, element: Hashable, flag: str) -> None:
        current = self._flags.get(element)
        if current is not None:
            current.discard(flag)

    def flags_of(self, element: Hashable) -> frozenset[str]:
        return frozenset(self._flags.get(element, ()))

    def has_flag(self, element: Hashable, flag: str) -> bool:
        return flag in self._flags.get(element, ())

    def elements_with(self, flag: str, among: Iterable[Hashable]) -> list[Hashable]:
        """Return the handles from `among` (in order) that carry `flag`."""
        return [element for element in among if self.has_flag(element, flag)]

    def class_suffix(self, element: Hashable) -> str:
        """Render flags as a class-attribute suffix such as `" active"`."""
        return "".join(f" {flag}" for flag in sorted(self.flags_of(element)))
