"""Navigation layout models shared by the controller and the HTML builder."""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from dataclasses import dataclass, field
from typing import Final

ACTIVE_FLAG: Final = "active"
PREV_FLAG: Final = "prev"
NAVIGATION_FLAGS: Final = (ACTIVE_FLAG, PREV_FLAG)
COVER_PAGE_COUNT: Final = 1


class NavigationLayoutError(ValueError):
    """Raised when a navigation layout cannot back a controller."""


@dataclass(frozen=True)
class SectionHandles:
    """One section container with its ordered pages and page indicators."""

    element: Hashable
    pages: tuple[Hashable, ...]
    page_indicators: tuple[Hashable, ...] = ()

    @property
    def page_count(self) -> int:
        return len(self.pages)


@dataclass(frozen=True)
class NavigationLayout:
    """Ordered sections plus one clickable indicator per section.

    Section 0 is the cover and always holds a single page.
    """

    sections: tuple[SectionHandles, ...]
    section_indicators: tuple[Hashable, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.sections:
            raise NavigationLayoutError("Navigation layout needs at least one section.")
        for index, section in enumerate(self.sections):
            if not section.pages:
                raise NavigationLayoutError(f"Section {index} has no pages.")
            if section.page_indicators and len(section.page_indicators) != section.page_count:
                raise NavigationLayoutError(
                    f"Section {index} has {section.page_count} pages but "
                    f"{len(section.page_indicators)} page indicators."
                )
        if self.sections[0].page_count != COVER_PAGE_COUNT:
            raise NavigationLayoutError(
                f"Section 0 is the cover and must have exactly {COVER_PAGE_COUNT} page."
            )
        if self.section_indicators and len(self.section_indicators) != len(self.sections):
            raise NavigationLayoutError(
                f"Layout has {len(self.sections)} sections but "
                f"{len(self.section_indicators)} section indicators."
            )

    @property
    def total_sections(self) -> int:
        return len(self.sections)

    @classmethod
    def from_page_counts(cls, page_counts: Sequence[int]) -> NavigationLayout:
        """Build a layout of string handles such as `section-1`, `page-1-0`, `page-dot-1-0`."""
        sections = tuple(
            SectionHandles(
                element=f"section-{section_index}",
                pages=tuple(f"page-{section_index}-{page}" for page in range(count)),
                page_indicators=tuple(
                    f"page-dot-{section_index}-{page}" for page in range(count)
                ),
            )
            for section_index, count in enumerate(page_counts)
        )
        indicators = tuple(f"section-dot-{index}" for index in range(len(page_counts)))
        return cls(sections=sections, section_indicators=indicators)
