"""Domain models and ports for magazine navigation."""

from magazine_gen.domain.models import (
    ACTIVE_FLAG,
    COVER_PAGE_COUNT,
    NAVIGATION_FLAGS,
    PREV_FLAG,
    NavigationLayout,
    NavigationLayoutError,
    SectionHandles,
)
from magazine_gen.domain.ports import ElementFlags

__all__ = [
    "ACTIVE_FLAG",
    "COVER_PAGE_COUNT",
    "ElementFlags",
    "NAVIGATION_FLAGS",
    "NavigationLayout",
    "NavigationLayoutError",
    "PREV_FLAG",
    "SectionHandles",
]
