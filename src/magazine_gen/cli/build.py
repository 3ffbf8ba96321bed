"""CLI for building a swipeable HTML magazine from JSON or Markdown."""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from magazine_gen.adapters.observability import configure_runtime_logging
from magazine_gen.api.contracts import MagazineConfig, MagazineConfigError, load_config_json
from magazine_gen.core.markdown_ingest import MarkdownIngestError, load_markdown_sources
from magazine_gen.magazine_builder import (
    DEFAULT_OUTPUT_DIR,
    MANIFEST_FILENAME,
    SERVICE_WORKER_FILENAME,
    MagazineArtifacts,
    build_magazine,
)

DEFAULT_MARKDOWN_TITLE = "Untitled Magazine"


@dataclass(frozen=True)
class BuildArgs:
    sources: tuple[Path, ...]
    output_dir: Path
    title: str | None
    subtitle: str | None
    issue: str | None
    filename: str | None
    custom_css_path: Path | None
    min_swipe_distance: float | None


def build_arg_parser() -> argparse.ArgumentParser:
    """Define CLI flags for magazine generation."""
    parser = argparse.ArgumentParser(
        prog="magazine-gen",
        description="Generate a swipeable, installable HTML magazine from JSON or Markdown.",
    )
    parser.add_argument(
        "sources",
        nargs="+",
        help="A config .json file, or Markdown files / directories of .md files.",
    )
    parser.add_argument("--output-dir", default=str(DEFAULT_OUTPUT_DIR))
    parser.add_argument("--title", default=None, help="Magazine title (overrides JSON).")
    parser.add_argument("--subtitle", default=None)
    parser.add_argument("--issue", default=None, help="Issue label shown on the cover.")
    parser.add_argument("--filename", default=None, help="HTML file name (default: magazine.html).")
    parser.add_argument(
        "--custom-css",
        default=None,
        help="Path to a CSS file appended to the embedded stylesheet.",
    )
    parser.add_argument(
        "--min-swipe-distance",
        type=float,
        default=None,
        help="Minimum swipe length in CSS pixels (default: 50).",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="Log progress (INFO).")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="Only log errors.")
    return parser


def _args_from_namespace(parsed: argparse.Namespace) -> BuildArgs:
    return BuildArgs(
        sources=tuple(Path(str(source)) for source in parsed.sources),
        output_dir=Path(str(parsed.output_dir)),
        title=parsed.title,
        subtitle=parsed.subtitle,
        issue=parsed.issue,
        filename=parsed.filename,
        custom_css_path=Path(str(parsed.custom_css)) if parsed.custom_css else None,
        min_swipe_distance=parsed.min_swipe_distance,
    )


def _overrides(args: BuildArgs) -> dict[str, Any]:
    overrides: dict[str, Any] = {
        "title": args.title,
        "subtitle": args.subtitle,
        "issue": args.issue,
        "filename": args.filename,
        "min_swipe_distance": args.min_swipe_distance,
    }
    if args.custom_css_path is not None:
        try:
            overrides["custom_css"] = args.custom_css_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise MagazineConfigError(
                f"Cannot read custom CSS {args.custom_css_path}: {exc}"
            ) from exc
    return {key: value for key, value in overrides.items() if value is not None}


def load_config(args: BuildArgs) -> MagazineConfig:
    """Resolve CLI sources into one validated magazine config."""
    overrides = _overrides(args)
    is_json = len(args.sources) == 1 and args.sources[0].suffix.lower() == ".json"
    if is_json:
        config = load_config_json(args.sources[0])
        if not overrides:
            return config
        merged = config.model_dump(exclude_none=True) | overrides
        try:
            return MagazineConfig.model_validate(merged)
        except ValidationError as exc:
            raise MagazineConfigError(f"Invalid CLI overrides:\n{exc}") from exc
    if any(source.suffix.lower() == ".json" for source in args.sources):
        raise MagazineConfigError("A JSON config must be the only source.")
    title = overrides.pop("title", None) or _default_title(args.sources)
    return load_markdown_sources(args.sources, title=title, **overrides)


def _default_title(sources: tuple[Path, ...]) -> str:
    if len(sources) == 1 and sources[0].is_dir():
        name = sources[0].resolve().name.replace("_", " ").replace("-", " ").strip()
        if name:
            return name.title()
    return DEFAULT_MARKDOWN_TITLE


def run_build(args: BuildArgs) -> MagazineArtifacts:
    config = load_config(args)
    return build_magazine(config, args.output_dir)


def _log_level(parsed: argparse.Namespace) -> str | None:
    if parsed.verbose:
        return "INFO"
    if parsed.quiet:
        return "ERROR"
    return None


def main(argv: list[str] | None = None) -> None:
    """Build the magazine and report the written files."""
    parser = build_arg_parser()
    parsed = parser.parse_args(argv)
    configure_runtime_logging(_log_level(parsed))

    args = _args_from_namespace(parsed)
    try:
        artifacts = run_build(args)
    except (MagazineConfigError, MarkdownIngestError) as exc:
        raise SystemExit(f"Error: {exc}") from exc

    print(f"Magazine generated: {artifacts.html_path}")
    print(f"PWA files created: {MANIFEST_FILENAME}, {SERVICE_WORKER_FILENAME}")


if __name__ == "__main__":
    main()
