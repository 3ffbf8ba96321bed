"""Ports between the navigation state machine and a rendering environment."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Protocol


class ElementFlags(Protocol):
    """Sets and clears status flags on opaque element handles."""

    def set_flag(self, element: Hashable, flag: str) -> None:
        ...

    def clear_flag(self, element: Hashable, flag: str) -> None:
        ...
