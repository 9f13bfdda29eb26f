"""Configuration loaded from .contenthandler.toml and env vars.

Loading order: defaults → TOML file → env vars.

Handlers never read configuration from a global. They receive a
``ConfigSource`` (usually a ``ContentHandlerConfig``) and ask it for named
properties when they need them.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".contenthandler.toml"
CONFIG_SEARCH_PATHS = [
    Path("."),
]
GLOBAL_CONFIG_PATH = Path.home() / ".config" / "contenthandler" / "config.toml"

# Property holding the complex-obs handler key for attachment concepts.
HANDLER_KEY_PROPERTY = "shr.contenthandler.unstructureddatahandler.key"


@runtime_checkable
class ConfigSource(Protocol):
    """Anything that can answer a named string property."""

    def get_property(self, name: str) -> str | None: ...


class UnstructuredSectionConfig(BaseModel):
    """[unstructured] section."""

    handler_key: str = "UnstructuredDataHandler"


class ContentHandlerConfig(BaseModel):
    """Top-level configuration model.

    ``properties`` holds arbitrary named properties (the ``[properties]``
    table, keyed by their dotted names). Explicit entries there win over
    the typed sections.
    """

    unstructured: UnstructuredSectionConfig = Field(default_factory=UnstructuredSectionConfig)
    properties: dict[str, str] = Field(default_factory=dict)

    def get_property(self, name: str) -> str | None:
        if name in self.properties:
            return self.properties[name]
        if name == HANDLER_KEY_PROPERTY:
            return self.unstructured.handler_key
        return None


def load_config(path: str | Path | None = None) -> ContentHandlerConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .contenthandler.toml in CWD
    3. ~/.config/contenthandler/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged ContentHandlerConfig.
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
        if not data and GLOBAL_CONFIG_PATH.exists():
            data = _load_toml(GLOBAL_CONFIG_PATH)
            logger.info("Loaded config from %s", GLOBAL_CONFIG_PATH)

    config = ContentHandlerConfig.model_validate(data) if data else ContentHandlerConfig()

    return _apply_env_vars(config)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: ContentHandlerConfig) -> ContentHandlerConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "CONTENTHANDLER_HANDLER_KEY": ("unstructured", "handler_key"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    # An explicit [properties] entry would otherwise shadow the env override
    handler_key = os.environ.get("CONTENTHANDLER_HANDLER_KEY")
    if handler_key is not None and HANDLER_KEY_PROPERTY in data["properties"]:
        data["properties"][HANDLER_KEY_PROPERTY] = handler_key

    return ContentHandlerConfig.model_validate(data)
