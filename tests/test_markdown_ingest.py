from __future__ import annotations

from pathlib import Path

import pytest

from magazine_gen.core.markdown_ingest import (
    MarkdownIngestError,
    load_markdown_sources,
    parse_section,
    render_inline,
    split_front_matter,
)


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_split_front_matter_reads_key_values() -> None:
    metadata, body = split_front_matter('---\nTitle: "Startups"\norder: 2\n---\nBody line\n')
    assert metadata == {"title": "Startups", "order": "2"}
    assert body == "Body line"


def test_split_front_matter_is_optional() -> None:
    metadata, body = split_front_matter("# Heading\n")
    assert metadata == {}
    assert body == "# Heading\n"


def test_split_front_matter_rejects_unterminated_block() -> None:
    with pytest.raises(MarkdownIngestError, match="closing"):
        split_front_matter("---\ntitle: x\n# never closed\n")


def test_split_front_matter_treats_leading_rule_as_body() -> None:
    text = "---\n\n# Heading\nBody text\n"
    assert split_front_matter(text) == ({}, text)

    section, _ = parse_section(text, default_title="Fallback")
    assert [page.title for page in section.pages] == ["Heading"]
    assert section.pages[0].content == ["Body text"]


def test_split_front_matter_drops_byte_order_mark() -> None:
    assert split_front_matter("\ufeff# Welcome\n") == ({}, "# Welcome\n")
    metadata, body = split_front_matter("\ufeff---\ntitle: Hi\n---\nBody\n")
    assert metadata == {"title": "Hi"}
    assert body == "Body"


def test_render_inline_converts_subset_and_escapes() -> None:
    html = render_inline(
        "A **bold** and *soft* `x < y` [docs](https://example.com/a?b=1&c=2) <b>"
    )
    assert "<strong>bold</strong>" in html
    assert "<em>soft</em>" in html
    assert "<code>x &lt; y</code>" in html
    assert '<a href="https://example.com/a?b=1&amp;c=2">docs</a>' in html
    assert "&lt;b&gt;" in html


def test_render_inline_keeps_code_literal_and_drops_unsafe_links() -> None:
    assert render_inline("`**not bold**`") == "<code>**not bold**</code>"
    assert render_inline("[click](javascript:alert%281%29)") == "click"
    assert render_inline("snake_case_name") == "snake_case_name"


def test_render_inline_leaves_link_urls_untouched_by_emphasis() -> None:
    assert (
        render_inline("[docs](https://example.com/_private_/x)")
        == '<a href="https://example.com/_private_/x">docs</a>'
    )
    assert (
        render_inline("see [**the** guide](/a/*b*/c) and _this_")
        == 'see <a href="/a/*b*/c"><strong>the</strong> guide</a> and <em>this</em>'
    )


def test_parse_section_splits_pages_on_headings() -> None:
    source = (
        "---\n"
        "title: AI\n"
        "background: ai-bg\n"
        "alt: Neural pattern\n"
        "---\n"
        "Intro before any heading.\n"
        "\n"
        "# Agents {.tech-bg}\n"
        "Agents plan\n"
        "and act.\n"
        "\n"
        "### Tools\n"
        "- search\n"
        "- code\n"
        "\n"
        "## Models\n"
        "1. small\n"
        "2. fast\n"
    )
    section, metadata = parse_section(source, default_title="Fallback")
    assert metadata["title"] == "AI"
    assert section.title == "AI"
    assert [page.title for page in section.pages] == ["AI", "Agents", "Models"]
    intro, agents, models = section.pages
    assert intro.content == ["Intro before any heading."]
    assert intro.background_class == "ai-bg"
    assert intro.alt_text == "Neural pattern"
    assert agents.background_class == "tech-bg"
    assert agents.content == [
        "Agents plan and act.",
        "<strong>Tools</strong>",
        "• search",
        "• code",
    ]
    assert models.background_class == "ai-bg"
    assert models.alt_text is None
    assert models.content == ["1. small", "2. fast"]


def test_parse_section_uses_default_title_and_rejects_empty() -> None:
    section, _ = parse_section("Just text.\n", default_title="Notes")
    assert section.title == "Notes"
    assert section.pages[0].title == "Notes"
    with pytest.raises(MarkdownIngestError, match="no content"):
        parse_section("---\ntitle: Blank\n---\n\n", default_title="x")


def test_parse_section_rejects_invalid_background() -> None:
    with pytest.raises(MarkdownIngestError, match="invalid"):
        parse_section("---\nbackground: not a class\n---\n# Page\ntext\n", default_title="x")


def test_load_markdown_sources_orders_sections(tmp_path: Path) -> None:
    content = tmp_path / "content"
    _write(content / "01-zeta.md", "# Zeta\nlast by order\n")
    _write(content / "02_alpha_notes.md", "---\norder: -1\n---\n# Alpha\nfirst\n")
    _write(content / "03-beta.md", "# Beta\nsecond by name\n")
    _write(content / "ignored.txt", "# Not markdown\n")

    config = load_markdown_sources(
        [content],
        title="Field Notes",
        issue="Issue 3",
        min_swipe_distance=70,
    )
    assert config.title == "Field Notes"
    assert config.issue == "Issue 3"
    assert config.min_swipe_distance == 70
    assert [section.title for section in config.sections] == ["Alpha Notes", "Zeta", "Beta"]
    assert config.page_counts() == [1, 1, 1, 1]


def test_load_markdown_sources_accepts_explicit_files(tmp_path: Path) -> None:
    first = _write(tmp_path / "b.md", "# B\nb\n")
    second = _write(tmp_path / "a.md", "# A\na\n")
    config = load_markdown_sources([first, second], title="Mixed")
    assert [section.pages[0].title for section in config.sections] == ["A", "B"]


def test_load_markdown_sources_errors(tmp_path: Path) -> None:
    with pytest.raises(MarkdownIngestError, match="not found"):
        load_markdown_sources([tmp_path / "missing"], title="x")
    empty = tmp_path / "empty"
    empty.mkdir()
    with pytest.raises(MarkdownIngestError, match="No Markdown files"):
        load_markdown_sources([empty], title="x")
    bad_order = _write(tmp_path / "bad.md", "---\norder: soon\n---\n# X\ny\n")
    with pytest.raises(MarkdownIngestError, match="order"):
        load_markdown_sources([bad_order], title="x")
    with pytest.raises(MarkdownIngestError, match="settings"):
        load_markdown_sources([_write(tmp_path / "ok.md", "# Ok\nfine\n")], title="")


def test_load_markdown_sources_reads_files_with_byte_order_mark(tmp_path: Path) -> None:
    path = tmp_path / "a.md"
    path.write_bytes("\ufeff# Welcome\nHello.\n".encode("utf-8"))
    config = load_markdown_sources([path], title="Bom")
    page = config.sections[0].pages[0]
    assert page.title == "Welcome"
    assert page.content == ["Hello."]
