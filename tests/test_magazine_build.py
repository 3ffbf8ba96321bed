from __future__ import annotations

import json
import re
from pathlib import Path

from magazine_gen.api.contracts import MagazineConfig
from magazine_gen.core.navigator_script import render_navigator_script
from magazine_gen.magazine_builder import (
    BACKGROUND_CLASSES,
    add_custom_css,
    build_magazine,
    build_page,
    build_pwa_manifest,
    build_service_worker,
)


def _config(**overrides: object) -> MagazineConfig:
    raw: dict[str, object] = {
        "title": "Tech <Weekly>",
        "subtitle": "The future, swiped",
        "issue": "Issue #12",
        "sections": [
            {
                "title": "AI",
                "pages": [
                    {
                        "title": "Agents",
                        "content": ["First <em>para</em>.", "Second."],
                        "backgroundClass": "ai-bg",
                        "altText": "colour wheel",
                    },
                    {"title": "Models", "content": ["Small."]},
                ],
            },
            {"pages": [{"title": "Seed", "content": ["Money."], "backgroundClass": "startup-bg"}]},
        ],
    }
    raw.update(overrides)
    return MagazineConfig.model_validate(raw)


def test_build_page_renders_cover_sections_and_indicators() -> None:
    page = build_page(_config())
    assert "<title>Tech &lt;Weekly&gt; - Issue #12</title>" in page
    assert '<h1 class="cover-title">Tech &lt;Weekly&gt;</h1>' in page
    assert '<p class="cover-issue">Issue #12</p>' in page
    assert '<link rel="manifest" href="manifest.json">' in page

    dots = re.findall(r'<div class="section-dot( active)?" data-section="(\d)"', page)
    assert dots == [(" active", "0"), ("", "1"), ("", "2")]
    assert 'aria-label="AI" title="AI"' in page
    assert 'aria-label="Section 2" title="Section 2"' in page

    assert '<section class="section active" data-section="0"' in page
    assert '<section class="section" data-section="1" aria-label="AI">' in page
    assert '<section class="section" data-section="2"' in page


def test_build_page_starts_every_section_on_its_first_page() -> None:
    page = build_page(_config())
    assert '<div class="page active ai-bg">' in page
    assert '<div class="page">' in page
    assert '<div class="page active startup-bg">' in page
    assert '<div class="page active cover-page">' in page
    assert page.count('class="page-dot active"') == 3
    assert page.count('class="page-dot"') == 1


def test_build_page_keeps_paragraph_html_and_escapes_alt_text() -> None:
    page = build_page(_config())
    assert "<p>First <em>para</em>.</p>" in page
    assert "<br>" in page
    assert '<div class="sr-only">colour wheel</div>' in page
    assert '<h2 class="article-title">Models</h2>' in page


def test_build_page_embeds_navigator_and_service_worker_registration() -> None:
    page = build_page(_config(minSwipeDistance=72))
    assert "class MagazineNavigator" in page
    assert "new MagazineNavigator(72)" in page
    assert "navigator.serviceWorker.register('./sw.js')" in page
    assert page.index("class MagazineNavigator") < page.index("</script>")


def test_navigator_script_mirrors_controller_bindings() -> None:
    script = render_navigator_script(50)
    for key in ("ArrowUp", "ArrowDown", "ArrowLeft", "ArrowRight"):
        assert key in script
    assert "e.preventDefault()" in script
    assert "this.currentPage = 0;" in script
    assert "new MagazineNavigator(50)" in script
    assert "new MagazineNavigator(12.5)" in render_navigator_script(12.5)


def test_build_page_supports_cover_only_magazine() -> None:
    page = build_page(MagazineConfig(title="Solo"))
    assert "<title>Solo</title>" in page
    assert page.count('class="section-dot') == 1
    assert page.count("<section ") == 1


def test_add_custom_css_inserts_before_first_style_close() -> None:
    html = "<style>a {}</style><style>b {}</style>"
    result = add_custom_css(html, ".x { color: red; }")
    assert result.startswith("<style>a {}\n        /* Custom CSS */\n        .x { color: red; }")
    assert result.endswith("</style><style>b {}</style>")
    assert add_custom_css(html, None) == html
    assert add_custom_css(html, "") == html


def test_build_page_applies_custom_css() -> None:
    page = build_page(_config(customCSS=".cover-title { color: gold; }"))
    custom = page.index("/* Custom CSS */")
    assert page.index(".sunset-bg") < custom < page.index("</style>")


def test_predefined_background_classes_are_styled() -> None:
    page = build_page(_config())
    for name in BACKGROUND_CLASSES:
        assert f".{name} {{" in page


def test_pwa_manifest_and_service_worker() -> None:
    config = _config(themeColor="#112233", cacheName="tech-weekly-12")
    manifest = build_pwa_manifest(config)
    assert manifest["name"] == "Tech <Weekly>"
    assert manifest["short_name"] == "Tech <Weekly>"
    assert manifest["description"] == "The future, swiped"
    assert manifest["start_url"] == "./"
    assert manifest["display"] == "standalone"
    assert manifest["orientation"] == "landscape"
    assert manifest["theme_color"] == "#112233"
    assert manifest["background_color"] == "#000000"
    assert [icon["sizes"] for icon in manifest["icons"]] == ["192x192", "512x512"]

    worker = build_service_worker(config)
    assert "const CACHE_NAME = 'tech-weekly-12';" in worker
    assert "'./manifest.json'" in worker
    assert "caches.match(event.request)" in worker


def test_build_magazine_writes_all_artifacts(tmp_path: Path) -> None:
    config = _config(filename="issue-12.html")
    artifacts = build_magazine(config, tmp_path / "out")
    assert artifacts.html_path == tmp_path / "out" / "issue-12.html"
    assert artifacts.html_path.read_text(encoding="utf-8") == build_page(config)
    manifest = json.loads(artifacts.manifest_path.read_text(encoding="utf-8"))
    assert manifest == build_pwa_manifest(config)
    assert artifacts.manifest_path.name == "manifest.json"
    assert artifacts.service_worker_path.name == "sw.js"
    assert artifacts.service_worker_path.read_text(encoding="utf-8") == build_service_worker(config)
