"""Markdown ingestion: one Markdown document per magazine section.

Only a narrow subset is understood: front matter, `#`/`##` page headings,
deeper headings, paragraphs, lists and inline bold/italic/code/links. Lists
are flattened into text paragraphs because magazine pages hold paragraphs only.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from html import escape, unescape
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from magazine_gen.api.contracts import MagazineConfig, PageBlock, SectionBlock

logger = logging.getLogger(__name__)

FRONT_MATTER_DELIMITER = "---"
BULLET = "•"

_HEADING = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_HEADING_CLASS = re.compile(r"\s*\{\s*\.([A-Za-z_][A-Za-z0-9_-]*)\s*\}\s*$")
_UNORDERED_ITEM = re.compile(r"^[-*+]\s+(.*)$")
_RULE = re.compile(r"^(?:-{3,}|\*{3,}|_{3,})$")
_ORDERED_ITEM = re.compile(r"^(\d+)[.)]\s+(.*)$")
_CODE_SPAN = re.compile(r"`([^`]+)`")
_LINK = re.compile(r"\[([^\]]+)\]\(([^)\s]+)\)")
_BOLD = re.compile(r"\*\*(.+?)\*\*|__(.+?)__")
_ITALIC = re.compile(r"(?<![\w*])\*(?!\s)(.+?)(?<!\s)\*(?!\*)|(?<!\w)_(?!\s)(.+?)(?<!\s)_(?!\w)")
_SAFE_URL = re.compile(r"^(?:https?:|mailto:|#|/|\./|\.\./|[A-Za-z0-9_-]+(?:[./][^:]*)?$)")
_FRONT_MATTER_KEY = re.compile(r"^[A-Za-z_][A-Za-z0-9_-]*$")


class MarkdownIngestError(ValueError):
    """Raised when Markdown sources cannot be turned into sections."""


@dataclass(frozen=True)
class MarkdownSection:
    """One parsed section plus the keys used to order it."""

    section: SectionBlock
    order: int
    source_name: str


def split_front_matter(text: str) -> tuple[dict[str, str], str]:
    """Split an optional leading `---` block of `key: value` lines from the body.

    A leading `---` followed by anything other than `key: value` lines is a
    horizontal rule and stays in the body.
    """
    text = text.lstrip("\ufeff")
    lines = text.splitlines()
    if not lines or lines[0].strip() != FRONT_MATTER_DELIMITER:
        return {}, text
    metadata: dict[str, str] = {}
    for offset, line in enumerate(lines[1:], start=1):
        stripped = line.strip()
        if stripped == FRONT_MATTER_DELIMITER:
            return metadata, "\n".join(lines[offset + 1 :])
        if not stripped or stripped.startswith("#"):
            continue
        key, separator, value = stripped.partition(":")
        if not separator or not _FRONT_MATTER_KEY.match(key.strip()):
            return {}, text
        metadata[key.strip().lower()] = _unquote(value.strip())
    raise MarkdownIngestError("Front matter is missing its closing `---` line.")


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
        return value[1:-1]
    return value


def render_inline(text: str) -> str:
    """Escape text and convert inline code, links, bold and italic to HTML."""
    code_spans: list[str] = []
    links: list[str] = []

    def stash_code(match: re.Match[str]) -> str:
        code_spans.append(f"<code>{escape(match.group(1))}</code>")
        return f"\x00{len(code_spans) - 1}\x00"

    def stash_link(match: re.Match[str]) -> str:
        links.append(_render_link(match))
        return f"\x01{len(links) - 1}\x01"

    # Code spans and links are stashed so emphasis never reaches their markup.
    html = _CODE_SPAN.sub(stash_code, text)
    html = escape(html, quote=False)
    html = _LINK.sub(stash_link, html)
    html = _emphasize(html)
    html = re.sub(r"\x01(\d+)\x01", lambda m: links[int(m.group(1))], html)
    return re.sub(r"\x00(\d+)\x00", lambda m: code_spans[int(m.group(1))], html)


def _emphasize(html: str) -> str:
    html = _BOLD.sub(lambda m: f"<strong>{m.group(1) or m.group(2)}</strong>", html)
    return _ITALIC.sub(lambda m: f"<em>{m.group(1) or m.group(2)}</em>", html)


def _render_link(match: re.Match[str]) -> str:
    label, url = _emphasize(match.group(1)), match.group(2)
    if not _SAFE_URL.match(url):
        return label
    return f'<a href="{escape(unescape(url), quote=True)}">{label}</a>'


def _split_heading_class(title: str) -> tuple[str, str | None]:
    match = _HEADING_CLASS.search(title)
    if match is None:
        return title, None
    return title[: match.start()].strip(), match.group(1)


@dataclass
class _PageDraft:
    title: str
    background_class: str | None
    content: list[str] = field(default_factory=list)
    alt_text: str | None = None


def parse_section(text: str, *, default_title: str) -> tuple[SectionBlock, dict[str, str]]:
    """Parse one Markdown document into a section and its front matter."""
    metadata, body = split_front_matter(text)
    section_title = metadata.get("title") or default_title
    default_background = metadata.get("background") or None

    pages: list[_PageDraft] = []
    paragraph_buffer: list[str] = []

    def open_page(title: str, background: str | None) -> None:
        pages.append(_PageDraft(title=title, background_class=background or default_background))

    def emit(paragraph: str) -> None:
        if not pages:
            open_page(section_title, None)
        pages[-1].content.append(paragraph)

    def flush_paragraph() -> None:
        """Emit the current paragraph buffer as a single content entry."""
        if paragraph_buffer:
            joined = " ".join(part.strip() for part in paragraph_buffer if part.strip())
            if joined:
                emit(render_inline(joined))
            paragraph_buffer.clear()

    for line in body.splitlines():
        stripped = line.strip()
        if not stripped or _RULE.match(stripped):
            flush_paragraph()
            continue
        heading = _HEADING.match(stripped)
        if heading:
            flush_paragraph()
            level = len(heading.group(1))
            title, background = _split_heading_class(heading.group(2))
            if level <= 2:
                open_page(title or section_title, background)
            else:
                emit(f"<strong>{render_inline(title)}</strong>")
            continue
        unordered = _UNORDERED_ITEM.match(stripped)
        if unordered:
            flush_paragraph()
            emit(f"{BULLET} {render_inline(unordered.group(1))}")
            continue
        ordered = _ORDERED_ITEM.match(stripped)
        if ordered:
            flush_paragraph()
            emit(f"{ordered.group(1)}. {render_inline(ordered.group(2))}")
            continue
        paragraph_buffer.append(line)

    flush_paragraph()

    if not pages:
        raise MarkdownIngestError(f"Section `{section_title}` has no content.")
    pages[0].alt_text = metadata.get("alt") or None
    try:
        section = SectionBlock(
            title=section_title,
            pages=[
                PageBlock(
                    title=page.title,
                    content=page.content,
                    background_class=page.background_class,
                    alt_text=page.alt_text,
                )
                for page in pages
            ],
        )
    except ValidationError as exc:
        raise MarkdownIngestError(f"Section `{section_title}` is invalid:\n{exc}") from exc
    return section, metadata


def _section_order(metadata: dict[str, str], source_name: str) -> int:
    raw = metadata.get("order", "").strip()
    if not raw:
        return 0
    try:
        return int(raw)
    except ValueError as exc:
        raise MarkdownIngestError(f"{source_name}: `order` must be an integer, got {raw!r}.") from exc


def _title_from_stem(stem: str) -> str:
    words = re.sub(r"^\d+[-_ ]*", "", stem).replace("_", " ").replace("-", " ").split()
    return " ".join(word.capitalize() for word in words) or stem


def collect_markdown_files(sources: Iterable[Path]) -> list[Path]:
    """Expand directories into their `*.md` files; keep explicit files as given."""
    files: list[Path] = []
    for source in sources:
        if source.is_dir():
            files.extend(sorted(path for path in source.glob("*.md") if path.is_file()))
        elif source.is_file():
            files.append(source)
        else:
            raise MarkdownIngestError(f"Markdown source not found: {source}")
    if not files:
        raise MarkdownIngestError("No Markdown files found.")
    return files


def read_markdown_sections(files: Sequence[Path]) -> list[MarkdownSection]:
    parsed: list[MarkdownSection] = []
    for path in files:
        try:
            text = path.read_text(encoding="utf-8-sig")
        except OSError as exc:
            raise MarkdownIngestError(f"Cannot read {path}: {exc}") from exc
        try:
            section, metadata = parse_section(text, default_title=_title_from_stem(path.stem))
        except MarkdownIngestError as exc:
            raise MarkdownIngestError(f"{path}: {exc}") from exc
        parsed.append(
            MarkdownSection(
                section=section,
                order=_section_order(metadata, path.name),
                source_name=path.name,
            )
        )
        logger.debug("markdown.section path=%s pages=%s", path, len(section.pages))
    parsed.sort(key=lambda item: (item.order, item.source_name))
    return parsed


def load_markdown_sources(
    sources: Iterable[Path],
    *,
    title: str,
    subtitle: str = "",
    issue: str = "",
    **options: Any,
) -> MagazineConfig:
    """Build a magazine config from Markdown files or directories of them."""
    files = collect_markdown_files(sources)
    sections = read_markdown_sections(files)
    logger.info("markdown.loaded files=%s sections=%s", len(files), len(sections))
    try:
        return MagazineConfig(
            title=title,
            subtitle=subtitle,
            issue=issue,
            sections=[item.section for item in sections],
            **options,
        )
    except ValidationError as exc:
        raise MarkdownIngestError(f"Invalid magazine settings:\n{exc}") from exc
