"""Typed magazine configuration contracts and JSON helpers."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from magazine_gen.domain.models import COVER_PAGE_COUNT

CSS_CLASS_PATTERN = re.compile(r"^-?[A-Za-z_][A-Za-z0-9_-]*$")
COLOR_PATTERN = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")
FILENAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*\.html$")

DEFAULT_FILENAME = "magazine.html"
DEFAULT_THEME_COLOR = "#667eea"
DEFAULT_BACKGROUND_COLOR = "#000000"
DEFAULT_CACHE_NAME = "magazine-v1"


class MagazineConfigError(ValueError):
    """Raised when a magazine configuration cannot be loaded."""


class ContractModel(BaseModel):
    """Base model config used by all magazine contracts."""

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        populate_by_name=True,
    )


class PageBlock(ContractModel):
    """One horizontally swiped page inside a section."""

    title: str = Field(min_length=1, max_length=300)
    content: list[str] = Field(default_factory=list)
    background_class: str | None = Field(default=None, alias="backgroundClass")
    alt_text: str | None = Field(default=None, alias="altText", max_length=2000)

    @field_validator("content")
    @classmethod
    def _drop_blank_paragraphs(cls, values: list[str]) -> list[str]:
        return [value.strip() for value in values if value.strip()]

    @field_validator("background_class")
    @classmethod
    def _validate_background_class(cls, value: str | None) -> str | None:
        if value is None or not value:
            return None
        if not CSS_CLASS_PATTERN.match(value):
            raise ValueError(f"backgroundClass `{value}` is not a valid CSS class name.")
        return value

    @field_validator("alt_text")
    @classmethod
    def _blank_alt_is_none(cls, value: str | None) -> str | None:
        return value or None


class SectionBlock(ContractModel):
    """A vertically swiped section owning one or more pages."""

    title: str | None = Field(default=None, max_length=300)
    pages: list[PageBlock] = Field(min_length=1)


class MagazineConfig(ContractModel):
    """Complete input for one generated magazine issue."""

    title: str = Field(min_length=1, max_length=300)
    subtitle: str = Field(default="", max_length=1000)
    issue: str = Field(default="", max_length=300)
    sections: list[SectionBlock] = Field(default_factory=list)
    custom_css: str | None = Field(default=None, alias="customCSS")
    filename: str = DEFAULT_FILENAME
    theme_color: str = Field(default=DEFAULT_THEME_COLOR, alias="themeColor")
    background_color: str = Field(default=DEFAULT_BACKGROUND_COLOR, alias="backgroundColor")
    min_swipe_distance: float = Field(default=50.0, gt=0, le=2000, alias="minSwipeDistance")
    cache_name: str = Field(default=DEFAULT_CACHE_NAME, min_length=1, max_length=120, alias="cacheName")

    @field_validator("filename")
    @classmethod
    def _validate_filename(cls, value: str) -> str:
        if not FILENAME_PATTERN.match(value):
            raise ValueError("filename must be a bare file name ending in .html.")
        return value

    @field_validator("theme_color", "background_color")
    @classmethod
    def _validate_color(cls, value: str) -> str:
        if not COLOR_PATTERN.match(value):
            raise ValueError(f"`{value}` is not a hex color such as #667eea.")
        return value.lower()

    @field_validator("cache_name")
    @classmethod
    def _validate_cache_name(cls, value: str) -> str:
        if any(char in "\"'\\" or not char.isprintable() for char in value):
            raise ValueError(
                "cacheName must not contain quotes, backslashes or control characters."
            )
        return value

    @property
    def total_sections(self) -> int:
        """Content sections plus the cover."""
        return len(self.sections) + 1

    def page_counts(self) -> list[int]:
        """Page count per section, cover first."""
        return [COVER_PAGE_COUNT, *(len(section.pages) for section in self.sections)]


def save_config_json(path: Path, config: MagazineConfig) -> None:
    """Persist config as readable JSON using the camelCase field names."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        config.model_dump_json(indent=2, by_alias=True, exclude_none=True) + "\n",
        encoding="utf-8",
    )


def load_config_json(path: Path) -> MagazineConfig:
    """Load and validate a magazine config from disk."""
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MagazineConfigError(f"Cannot read config {path}: {exc}") from exc
    try:
        return MagazineConfig.model_validate_json(raw)
    except ValidationError as exc:
        raise MagazineConfigError(f"Invalid config {path}:\n{exc}") from exc
