"""Public configuration contracts for magazine generation."""

from magazine_gen.api.contracts import (
    MagazineConfig,
    MagazineConfigError,
    PageBlock,
    SectionBlock,
    load_config_json,
    save_config_json,
)

__all__ = [
    "MagazineConfig",
    "MagazineConfigError",
    "PageBlock",
    "SectionBlock",
    "load_config_json",
    "save_config_json",
]
