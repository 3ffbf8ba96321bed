"""Single-file HTML magazine builder with PWA manifest and service worker."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from html import escape
from pathlib import Path
from typing import Any

from magazine_gen.adapters.flag_store import InMemoryFlagStore
from magazine_gen.api.contracts import MagazineConfig, PageBlock, SectionBlock
from magazine_gen.core.navigation import NavigationController
from magazine_gen.core.navigator_script import (
    render_navigator_script,
    render_service_worker_registration,
)
from magazine_gen.domain.models import NavigationLayout

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("output")
MANIFEST_FILENAME = "manifest.json"
SERVICE_WORKER_FILENAME = "sw.js"
COVER_LABEL = "Cover"

BACKGROUND_CLASSES = (
    "tech-bg",
    "ai-bg",
    "startup-bg",
    "future-bg",
    "nature-bg",
    "sunset-bg",
)

MAGAZINE_CSS = """
        * {
            margin: 0;
            padding: 0;
            box-sizing: border-box;
        }

        body {
            font-family: 'Georgia', serif;
            overflow: hidden;
            height: 100vh;
            width: 100vw;
            background: #000;
        }

        @media screen and (orientation: portrait) {
            body::before {
                content: "For best experience, please rotate to landscape";
                position: fixed;
                top: 50%;
                left: 50%;
                transform: translate(-50%, -50%);
                color: white;
                font-size: 1.2rem;
                z-index: 1000;
                background: rgba(0, 0, 0, 0.8);
                padding: 20px;
                border-radius: 10px;
            }
        }

        .magazine-container {
            height: 100vh;
            width: 100vw;
            position: relative;
            overflow: hidden;
        }

        .section {
            position: absolute;
            width: 100%;
            height: 100%;
            transition: transform 0.6s cubic-bezier(0.25, 0.46, 0.45, 0.94);
            transform: translateY(100vh);
        }

        .section.active { transform: translateY(0); }
        .section.prev { transform: translateY(-100vh); }

        .page {
            position: absolute;
            width: 100%;
            height: 100%;
            transition: transform 0.4s cubic-bezier(0.25, 0.46, 0.45, 0.94);
            transform: translateX(100%);
            background-size: cover;
            background-position: center;
        }

        .page.active { transform: translateX(0); }
        .page.prev { transform: translateX(-100%); }

        .page-content {
            position: relative;
            height: 100%;
            display: flex;
            flex-direction: column;
            justify-content: center;
            align-items: center;
            padding: 40px;
            background: rgba(0, 0, 0, 0.4);
        }

        .cover-page {
            background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
            color: white;
            text-align: center;
        }

        .cover-title {
            font-size: 4rem;
            font-weight: bold;
            margin-bottom: 20px;
            text-shadow: 2px 2px 4px rgba(0, 0, 0, 0.5);
        }

        .cover-subtitle { font-size: 1.5rem; margin-bottom: 40px; opacity: 0.9; }
        .cover-issue { font-size: 1.2rem; opacity: 0.8; }

        .article-title {
            font-size: 3rem;
            font-weight: bold;
            margin-bottom: 30px;
            text-align: center;
            color: white;
            text-shadow: 2px 2px 4px rgba(0, 0, 0, 0.7);
        }

        .article-content {
            font-size: 1.2rem;
            line-height: 1.8;
            max-width: 800px;
            color: white;
            text-shadow: 1px 1px 2px rgba(0, 0, 0, 0.7);
            text-align: justify;
        }

        .article-content a { color: #a8edea; }
        .article-content code {
            font-family: 'Consolas', 'Monaco', 'Courier New', monospace;
            background: rgba(255, 255, 255, 0.15);
            padding: 2px 5px;
            border-radius: 4px;
        }

        .navigation-hint {
            position: absolute;
            bottom: 20px;
            right: 20px;
            color: rgba(255, 255, 255, 0.7);
            font-size: 0.9rem;
            text-align: right;
        }

        .section-indicator {
            position: absolute;
            left: 20px;
            top: 50%;
            transform: translateY(-50%);
            display: flex;
            flex-direction: column;
            gap: 10px;
            z-index: 100;
        }

        .section-dot {
            width: 12px;
            height: 12px;
            border-radius: 50%;
            background: rgba(255, 255, 255, 0.3);
            transition: background 0.3s ease;
            cursor: pointer;
        }

        .section-dot.active { background: rgba(255, 255, 255, 0.9); }

        .page-indicator {
            position: absolute;
            bottom: 20px;
            left: 50%;
            transform: translateX(-50%);
            display: flex;
            gap: 10px;
        }

        .page-dot {
            width: 8px;
            height: 8px;
            border-radius: 50%;
            background: rgba(255, 255, 255, 0.3);
            transition: background 0.3s ease;
        }

        .page-dot.active { background: rgba(255, 255, 255, 0.9); }

        .sr-only {
            position: absolute;
            width: 1px;
            height: 1px;
            padding: 0;
            margin: -1px;
            overflow: hidden;
            clip: rect(0, 0, 0, 0);
            white-space: nowrap;
            border: 0;
        }

        /* Predefined background classes */
        .tech-bg {
            background: linear-gradient(rgba(0, 0, 0, 0.6), rgba(0, 0, 0, 0.6)),
                        radial-gradient(circle at 20% 50%, #00d4ff 0%, transparent 50%),
                        radial-gradient(circle at 80% 20%, #ff0080 0%, transparent 50%),
                        radial-gradient(circle at 40% 80%, #8000ff 0%, transparent 50%),
                        #1a1a2e;
        }

        .ai-bg {
            background: linear-gradient(rgba(0, 0, 0, 0.5), rgba(0, 0, 0, 0.5)),
                        conic-gradient(from 0deg at 50% 50%, #ff6b6b, #4ecdc4, #45b7d1, #96ceb4, #feca57, #ff6b6b);
        }

        .startup-bg {
            background: linear-gradient(rgba(0, 0, 0, 0.6), rgba(0, 0, 0, 0.6)),
                        linear-gradient(45deg, #ff9a9e 0%, #fecfef 50%, #fecfef 100%);
        }

        .future-bg {
            background: linear-gradient(rgba(0, 0, 0, 0.5), rgba(0, 0, 0, 0.5)),
                        linear-gradient(180deg, #a8edea 0%, #fed6e3 100%);
        }

        .nature-bg {
            background: linear-gradient(rgba(0, 0, 0, 0.4), rgba(0, 0, 0, 0.4)),
                        linear-gradient(120deg, #a8e6cf 0%, #dcedc8 100%);
        }

        .sunset-bg {
            background: linear-gradient(rgba(0, 0, 0, 0.3), rgba(0, 0, 0, 0.3)),
                        linear-gradient(45deg, #ff9a56 0%, #ff6b95 100%);
        }
"""


@dataclass(frozen=True)
class MagazineArtifacts:
    """Paths written by one `build_magazine` run."""

    html_path: Path
    manifest_path: Path
    service_worker_path: Path


def initial_flags(config: MagazineConfig) -> tuple[NavigationLayout, InMemoryFlagStore]:
    """Derive the markup's starting `active`/`prev` flags from a fresh controller.

    Every section is visited once so each one starts on its first page, then
    the controller returns to the cover.
    """
    layout = NavigationLayout.from_page_counts(config.page_counts())
    flags = InMemoryFlagStore()
    controller = NavigationController(layout, flags, min_swipe_distance=config.min_swipe_distance)
    for index in range(controller.total_sections):
        controller.go_to_section(index)
    controller.go_to_section(0)
    return layout, flags


def build_section_indicators(
    config: MagazineConfig,
    flags: InMemoryFlagStore,
    layout: NavigationLayout,
) -> str:
    """Render one clickable dot per section, the cover being section 0."""
    labels = [
        COVER_LABEL,
        *(_section_label(section, index) for index, section in enumerate(config.sections, start=1)),
    ]
    dots = []
    for index, (handle, label) in enumerate(zip(layout.section_indicators, labels, strict=True)):
        dots.append(
            f'<div class="section-dot{flags.class_suffix(handle)}" data-section="{index}" '
            f'role="button" tabindex="0" aria-label="{escape(label)}" title="{escape(label)}"></div>'
        )
    return "\n            ".join(dots)


def _section_label(section: SectionBlock, index: int) -> str:
    return section.title or f"Section {index}"


def _page_html(page: PageBlock, css_class: str) -> str:
    classes = " ".join(part for part in (css_class, page.background_class or "") if part)
    paragraphs = "\n                        <br>\n                        ".join(
        f"<p>{paragraph}</p>" for paragraph in page.content
    )
    alt_block = ""
    if page.alt_text:
        alt_block = f'\n                    <div class="sr-only">{escape(page.alt_text)}</div>'
    return f"""            <div class="{classes}">
                <div class="page-content">
                    <h2 class="article-title">{escape(page.title)}</h2>
                    <div class="article-content">
                        {paragraphs}
                    </div>{alt_block}
                </div>
            </div>"""


def build_section_html(
    section: SectionBlock,
    section_index: int,
    flags: InMemoryFlagStore,
    layout: NavigationLayout,
) -> str:
    """Render one content section (index >= 1) with its pages and page dots."""
    handles = layout.sections[section_index]
    pages_html = "\n".join(
        _page_html(page, f"page{flags.class_suffix(handle)}")
        for page, handle in zip(section.pages, handles.pages, strict=True)
    )
    page_dots = "\n                ".join(
        f'<div class="page-dot{flags.class_suffix(handle)}"></div>'
        for handle in handles.page_indicators
    )
    section_class = f"section{flags.class_suffix(handles.element)}"
    label = escape(_section_label(section, section_index))
    return f"""        <section class="{section_class}" data-section="{section_index}" aria-label="{label}">
{pages_html}
            <div class="page-indicator">
                {page_dots}
            </div>
        </section>"""


def _cover_html(config: MagazineConfig, flags: InMemoryFlagStore, layout: NavigationLayout) -> str:
    cover = layout.sections[0]
    section_class = f"section{flags.class_suffix(cover.element)}"
    return f"""        <section class="{section_class}" data-section="0" aria-label="{COVER_LABEL}">
            <div class="page{flags.class_suffix(cover.pages[0])} cover-page">
                <div class="page-content">
                    <h1 class="cover-title">{escape(config.title)}</h1>
                    <p class="cover-subtitle">{escape(config.subtitle)}</p>
                    <p class="cover-issue">{escape(config.issue)}</p>
                </div>
                <div class="navigation-hint">
                    Swipe &#8597; for sections<br>
                    Swipe &#8592; &#8594; for pages
                </div>
            </div>
            <div class="page-indicator">
                <div class="page-dot{flags.class_suffix(cover.page_indicators[0])}"></div>
            </div>
        </section>"""


def add_custom_css(html: str, custom_css: str | None) -> str:
    """Insert custom CSS right before the first closing `</style>` tag."""
    if not custom_css:
        return html
    insert_point = html.find("</style>")
    if insert_point < 0:
        return html
    return (
        html[:insert_point]
        + "\n        /* Custom CSS */\n        "
        + custom_css
        + "\n    "
        + html[insert_point:]
    )


def build_page(config: MagazineConfig) -> str:
    """Render the complete self-contained magazine document."""
    layout, flags = initial_flags(config)
    sections_html = "\n\n".join(
        build_section_html(section, index, flags, layout)
        for index, section in enumerate(config.sections, start=1)
    )
    title = escape(config.title)
    head_title = f"{title} - {escape(config.issue)}" if config.issue else title
    page = f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <meta name="theme-color" content="{config.theme_color}">
    <meta name="description" content="{escape(config.subtitle)}">
    <link rel="manifest" href="{MANIFEST_FILENAME}">
    <title>{head_title}</title>
    <style>{MAGAZINE_CSS}    </style>
</head>
<body>
    <div class="magazine-container">
        <div class="section-indicator">
            {build_section_indicators(config, flags, layout)}
        </div>

{_cover_html(config, flags, layout)}

{sections_html}
    </div>

    <script>{render_navigator_script(config.min_swipe_distance)}{render_service_worker_registration()}    </script>
</body>
</html>
"""
    return add_custom_css(page, config.custom_css)


def build_pwa_manifest(config: MagazineConfig) -> dict[str, Any]:
    """Return the web app manifest for the generated magazine."""
    return {
        "name": config.title,
        "short_name": config.title,
        "description": config.subtitle,
        "start_url": "./",
        "display": "standalone",
        "orientation": "landscape",
        "background_color": config.background_color,
        "theme_color": config.theme_color,
        "icons": [
            {"src": "icon-192.png", "sizes": "192x192", "type": "image/png"},
            {"src": "icon-512.png", "sizes": "512x512", "type": "image/png"},
        ],
    }


def build_service_worker(config: MagazineConfig) -> str:
    """Return a cache-first service worker for the magazine and its manifest."""
    return f"""const CACHE_NAME = '{config.cache_name}';
const urlsToCache = [
    './',
    './{MANIFEST_FILENAME}'
];

self.addEventListener('install', event => {{
    event.waitUntil(
        caches.open(CACHE_NAME)
            .then(cache => cache.addAll(urlsToCache))
    );
}});

self.addEventListener('fetch', event => {{
    event.respondWith(
        caches.match(event.request)
            .then(response => {{
                if (response) {{
                    return response;
                }}
                return fetch(event.request);
            }})
    );
}});
"""


def build_magazine(
    config: MagazineConfig,
    output_dir: Path = DEFAULT_OUTPUT_DIR,
) -> MagazineArtifacts:
    """Write the magazine HTML, `manifest.json` and `sw.js` into `output_dir`."""
    logger.info(
        "magazine.build title=%r sections=%s pages=%s output_dir=%s",
        config.title,
        config.total_sections,
        sum(config.page_counts()),
        output_dir,
    )
    output_dir.mkdir(parents=True, exist_ok=True)
    html_path = output_dir / config.filename
    manifest_path = output_dir / MANIFEST_FILENAME
    service_worker_path = output_dir / SERVICE_WORKER_FILENAME

    html_path.write_text(build_page(config), encoding="utf-8")
    manifest_path.write_text(
        json.dumps(build_pwa_manifest(config), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    service_worker_path.write_text(build_service_worker(config), encoding="utf-8")

    unknown = sorted(
        {
            page.background_class
            for section in config.sections
            for page in section.pages
            if page.background_class and page.background_class not in BACKGROUND_CLASSES
        }
    )
    if unknown and not config.custom_css:
        logger.warning("magazine.background_unknown classes=%s", ",".join(unknown))
    logger.info(
        "magazine.written html=%s manifest=%s sw=%s",
        html_path,
        manifest_path,
        service_worker_path,
    )
    return MagazineArtifacts(
        html_path=html_path,
        manifest_path=manifest_path,
        service_worker_path=service_worker_path,
    )
