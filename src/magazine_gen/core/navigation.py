"""Section/page navigation state machine for generated magazines.

The controller owns two coordinates, the current section and the current page
inside it, and mirrors them onto injected element handles as `active`/`prev`
flags. Out-of-range requests are absorbed as no-ops.
"""

from __future__ import annotations

from collections.abc import Hashable, Sequence
from typing import Final, Literal, NamedTuple

from magazine_gen.domain.models import (
    ACTIVE_FLAG,
    NAVIGATION_FLAGS,
    PREV_FLAG,
    NavigationLayout,
    SectionHandles,
)
from magazine_gen.domain.ports import ElementFlags

DEFAULT_MIN_SWIPE_DISTANCE: Final = 50.0


class Point(NamedTuple):
    """A touch coordinate in device-independent pixels."""

    x: float
    y: float


SwipeDirection = Literal["next_section", "prev_section", "next_page", "prev_page"]


KEY_BINDINGS: Final[dict[str, SwipeDirection]] = {
    "ArrowUp": "prev_section",
    "ArrowDown": "next_section",
    "ArrowLeft": "prev_page",
    "ArrowRight": "next_page",
}


def classify_swipe(
    start: Point,
    end: Point,
    min_distance: float = DEFAULT_MIN_SWIPE_DISTANCE,
) -> SwipeDirection | None:
    """Map one gesture to a direction, or `None` when it is too short.

    The dominant axis wins; ties count as horizontal.
    """
    delta_x = end.x - start.x
    delta_y = end.y - start.y
    abs_x = abs(delta_x)
    abs_y = abs(delta_y)
    if max(abs_x, abs_y) < min_distance:
        return None
    if abs_y > abs_x:
        return "next_section" if delta_y < 0 else "prev_section"
    return "next_page" if delta_x < 0 else "prev_page"


class NavigationController:
    """Translate swipes, key presses and indicator clicks into transitions."""

    def __init__(
        self,
        layout: NavigationLayout,
        flags: ElementFlags,
        *,
        min_swipe_distance: float = DEFAULT_MIN_SWIPE_DISTANCE,
    ) -> None:
        if min_swipe_distance <= 0:
            raise ValueError("min_swipe_distance must be positive.")
        self._layout = layout
        self._flags = flags
        self.min_swipe_distance = min_swipe_distance
        self._current_section = 0
        self._current_page = 0
        self._touch_start: Point | None = None
        self.sync()

    @property
    def current_section(self) -> int:
        return self._current_section

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def total_sections(self) -> int:
        return self._layout.total_sections

    @property
    def state(self) -> tuple[int, int]:
        return (self._current_section, self._current_page)

    def page_count(self, section_index: int | None = None) -> int:
        index = self._current_section if section_index is None else section_index
        return self._layout.sections[index].page_count

    # Section transitions

    def go_to_section(self, index: int) -> None:
        if not 0 <= index < self.total_sections:
            return
        _mark_positions(self._flags, [s.element for s in self._layout.sections], index)
        self._current_section = index
        self._current_page = 0
        self._update_section_indicators()
        self._update_pages()

    def next_section(self) -> None:
        if self._current_section < self.total_sections - 1:
            self.go_to_section(self._current_section + 1)

    def prev_section(self) -> None:
        if self._current_section > 0:
            self.go_to_section(self._current_section - 1)

    # Page transitions

    def go_to_page(self, index: int) -> None:
        section = self._active_section()
        if not 0 <= index < section.page_count:
            return
        _mark_positions(self._flags, section.pages, index)
        self._current_page = index
        self._update_page_indicators()

    def next_page(self) -> None:
        if self._current_page < self.page_count() - 1:
            self.go_to_page(self._current_page + 1)

    def prev_page(self) -> None:
        if self._current_page > 0:
            self.go_to_page(self._current_page - 1)

    # Input events

    def apply(self, direction: SwipeDirection) -> None:
        actions = {
            "next_section": self.next_section,
            "prev_section": self.prev_section,
            "next_page": self.next_page,
            "prev_page": self.prev_page,
        }
        actions[direction]()

    def handle_swipe(self, start: Point, end: Point) -> SwipeDirection | None:
        direction = classify_swipe(start, end, self.min_swipe_distance)
        if direction is not None:
            self.apply(direction)
        return direction

    def touch_start(self, point: Point) -> None:
        self._touch_start = point

    def touch_end(self, point: Point) -> SwipeDirection | None:
        """Classify the gesture opened by `touch_start` and discard the sample."""
        start = self._touch_start if self._touch_start is not None else Point(0.0, 0.0)
        self._touch_start = None
        return self.handle_swipe(start, point)

    def handle_key(self, key: str) -> bool:
        """Apply an arrow key; returns True when default scrolling must be suppressed."""
        direction = KEY_BINDINGS.get(key)
        if direction is None:
            return False
        self.apply(direction)
        return True

    def click_indicator(self, index: int) -> None:
        self.go_to_section(index)

    # Flag synchronization

    def sync(self) -> None:
        """Re-derive every flag from `(current_section, current_page)`."""
        _mark_positions(
            self._flags,
            [section.element for section in self._layout.sections],
            self._current_section,
        )
        self._update_section_indicators()
        self._update_pages()

    def _active_section(self) -> SectionHandles:
        return self._layout.sections[self._current_section]

    def _update_pages(self) -> None:
        _mark_positions(self._flags, self._active_section().pages, self._current_page)
        self._update_page_indicators()

    def _update_section_indicators(self) -> None:
        _mark_active(self._flags, self._layout.section_indicators, self._current_section)

    def _update_page_indicators(self) -> None:
        _mark_active(self._flags, self._active_section().page_indicators, self._current_page)


def _mark_positions(flags: ElementFlags, elements: Sequence[Hashable], current: int) -> None:
    for index, element in enumerate(elements):
        for flag in NAVIGATION_FLAGS:
            flags.clear_flag(element, flag)
        if index == current:
            flags.set_flag(element, ACTIVE_FLAG)
        elif index < current:
            flags.set_flag(element, PREV_FLAG)


def _mark_active(flags: ElementFlags, elements: Sequence[Hashable], current: int) -> None:
    for index, element in enumerate(elements):
        if index == current:
            flags.set_flag(element, ACTIVE_FLAG)
        else:
            flags.clear_flag(element, ACTIVE_FLAG)
