"""Unified configuration loaded from .folio.toml, env vars, and CLI flags.

Loading order: defaults → TOML file → env vars → CLI flags.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from folio.content.store import ContentStore

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".folio.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG = Path.home() / ".config" / "folio" / "config.toml"


class ContentSectionConfig(BaseModel):
    """[content] section."""

    directory: str = "src/content"
    extensions: list[str] = Field(default_factory=lambda: [".md", ".mdx"])
    skip_hidden: bool = True
    public_dir: str = ""


class CheckSectionConfig(BaseModel):
    """[check] section."""

    strict: bool = False
    references: bool = True


class FolioConfig(BaseModel):
    """Top-level configuration model."""

    content: ContentSectionConfig = Field(default_factory=ContentSectionConfig)
    check: CheckSectionConfig = Field(default_factory=CheckSectionConfig)

    def to_store(self, root: Path | None = None) -> ContentStore:
        """Build a ContentStore from the [content] and [check] sections.

        Args:
            root: Content directory; overrides ``content.directory``.
        """
        from folio.content.store import ContentStore

        public_dir = Path(self.content.public_dir) if self.content.public_dir else None
        return ContentStore(
            root if root is not None else Path(self.content.directory),
            extensions=self.content.extensions,
            skip_hidden=self.content.skip_hidden,
            check_references=self.check.references,
            public_dir=public_dir,
        )


def load_config(path: str | Path | None = None) -> FolioConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .folio.toml in CWD
    3. ~/.config/folio/config.toml

    Then overlay environment variables.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for search_dir in CONFIG_SEARCH_PATHS:
            candidate = search_dir / CONFIG_FILENAME
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break
        if not data and GLOBAL_CONFIG.exists():
            data = _load_toml(GLOBAL_CONFIG)
            logger.info("Loaded config from %s", GLOBAL_CONFIG)

    config = FolioConfig.model_validate(data) if data else FolioConfig()

    return _apply_env_vars(config)


def merge_cli_overrides(config: FolioConfig, **cli_kwargs: object) -> FolioConfig:
    """Overlay explicitly-set CLI flags onto the config.

    Only overrides values where the CLI flag was explicitly provided
    (i.e., not None).
    """
    data = config.model_dump()

    mapping: dict[str, tuple[str, str]] = {
        "content_directory": ("content", "directory"),
        "public_dir": ("content", "public_dir"),
        "strict": ("check", "strict"),
        "references": ("check", "references"),
    }

    for key, value in cli_kwargs.items():
        if value is None:
            continue
        if key in mapping:
            section, field = mapping[key]
            data[section][field] = str(value) if isinstance(value, Path) else value

    return FolioConfig.model_validate(data)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: FolioConfig) -> FolioConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "FOLIO_CONTENT_DIR": ("content", "directory"),
        "FOLIO_PUBLIC_DIR": ("content", "public_dir"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    strict_raw = os.environ.get("FOLIO_STRICT")
    if strict_raw is not None:
        data["check"]["strict"] = strict_raw.lower() in ("true", "1", "yes")

    return FolioConfig.model_validate(data)
