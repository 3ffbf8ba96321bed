"""Browser script assets embedded in generated magazines.

`NAVIGATOR_SCRIPT` is the in-page twin of
`magazine_gen.core.navigation.NavigationController`: same key bindings, same
swipe threshold rule, no wraparound, page reset on section change.
"""

from __future__ import annotations

from typing import Final

from magazine_gen.core.navigation import DEFAULT_MIN_SWIPE_DISTANCE

_MIN_SWIPE_TOKEN: Final = "__MIN_SWIPE_DISTANCE__"

NAVIGATOR_SCRIPT: Final = """
        class MagazineNavigator {
            constructor(minSwipeDistance) {
                this.currentSection = 0;
                this.currentPage = 0;
                this.sections = Array.from(document.querySelectorAll('.section'));
                this.sectionDots = Array.from(document.querySelectorAll('.section-dot'));
                this.totalSections = this.sections.length;
                this.touchStart = null;
                this.minSwipeDistance = minSwipeDistance;
                this.addEventListeners();
                this.sync();
            }

            addEventListeners() {
                document.addEventListener('touchstart', (e) => {
                    const touch = e.changedTouches[0];
                    this.touchStart = { x: touch.screenX, y: touch.screenY };
                });
                document.addEventListener('touchend', (e) => {
                    const touch = e.changedTouches[0];
                    const start = this.touchStart || { x: 0, y: 0 };
                    this.touchStart = null;
                    this.handleSwipe(start, { x: touch.screenX, y: touch.screenY });
                });
                document.addEventListener('keydown', (e) => this.handleKeyDown(e));
                this.sectionDots.forEach((dot, index) => {
                    dot.addEventListener('click', () => this.goToSection(index));
                });
            }

            handleSwipe(start, end) {
                const deltaX = end.x - start.x;
                const deltaY = end.y - start.y;
                const absX = Math.abs(deltaX);
                const absY = Math.abs(deltaY);
                if (Math.max(absX, absY) < this.minSwipeDistance) return;
                if (absY > absX) {
                    if (deltaY < 0) { this.nextSection(); } else { this.prevSection(); }
                } else {
                    if (deltaX < 0) { this.nextPage(); } else { this.prevPage(); }
                }
            }

            handleKeyDown(e) {
                const actions = {
                    ArrowUp: () => this.prevSection(),
                    ArrowDown: () => this.nextSection(),
                    ArrowLeft: () => this.prevPage(),
                    ArrowRight: () => this.nextPage(),
                };
                const action = actions[e.key];
                if (!action) return;
                e.preventDefault();
                action();
            }

            pages() {
                return Array.from(this.sections[this.currentSection].querySelectorAll('.page'));
            }

            pageDots() {
                return Array.from(this.sections[this.currentSection].querySelectorAll('.page-dot'));
            }

            markPositions(elements, current) {
                elements.forEach((element, index) => {
                    element.classList.remove('active', 'prev');
                    if (index === current) {
                        element.classList.add('active');
                    } else if (index < current) {
                        element.classList.add('prev');
                    }
                });
            }

            markActive(elements, current) {
                elements.forEach((element, index) => {
                    element.classList.toggle('active', index === current);
                });
            }

            goToSection(index) {
                if (index < 0 || index >= this.totalSections) return;
                this.markPositions(this.sections, index);
                this.currentSection = index;
                this.currentPage = 0;
                this.markActive(this.sectionDots, this.currentSection);
                this.updatePages();
            }

            nextSection() {
                if (this.currentSection < this.totalSections - 1) {
                    this.goToSection(this.currentSection + 1);
                }
            }

            prevSection() {
                if (this.currentSection > 0) {
                    this.goToSection(this.currentSection - 1);
                }
            }

            goToPage(index) {
                const pages = this.pages();
                if (index < 0 || index >= pages.length) return;
                this.markPositions(pages, index);
                this.currentPage = index;
                this.markActive(this.pageDots(), this.currentPage);
            }

            nextPage() {
                if (this.currentPage < this.pages().length - 1) {
                    this.goToPage(this.currentPage + 1);
                }
            }

            prevPage() {
                if (this.currentPage > 0) {
                    this.goToPage(this.currentPage - 1);
                }
            }

            updatePages() {
                this.markPositions(this.pages(), this.currentPage);
                this.markActive(this.pageDots(), this.currentPage);
            }

            sync() {
                this.markPositions(this.sections, this.currentSection);
                this.markActive(this.sectionDots, this.currentSection);
                this.updatePages();
            }
        }

        document.addEventListener('DOMContentLoaded', () => {
            window.magazineNavigator = new MagazineNavigator(__MIN_SWIPE_DISTANCE__);
        });
"""

SERVICE_WORKER_REGISTRATION: Final = """
        if ('serviceWorker' in navigator) {
            window.addEventListener('load', () => {
                navigator.serviceWorker.register('./sw.js')
                    .then(() => console.log('SW registered'))
                    .catch(() => console.log('SW registration failed'));
            });
        }
"""


def _format_number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else repr(float(value))


def render_navigator_script(min_swipe_distance: float = DEFAULT_MIN_SWIPE_DISTANCE) -> str:
    """Return the navigation controller script with its swipe threshold filled in."""
    if min_swipe_distance <= 0:
        raise ValueError("min_swipe_distance must be positive.")
    return NAVIGATOR_SCRIPT.replace(_MIN_SWIPE_TOKEN, _format_number(min_swipe_distance))


def render_service_worker_registration() -> str:
    return SERVICE_WORKER_REGISTRATION
