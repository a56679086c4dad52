"""Configuration loading for Plume.

Settings live in ``~/.config/plume/config.toml``; set ``PLUME_HOME`` to
use another directory. Every key is optional:

    [storage]
    db_path = "~/.config/plume/plume.db"

    [export]
    directory = "~"

    [wordcloud]
    max_words = 30
"""

import logging
import os
from pathlib import Path
from typing import Optional

import toml
from pydantic import BaseModel, Field, ValidationError

from plume.stats.wordcloud import DEFAULT_MAX_WORDS

logger = logging.getLogger(__name__)


def config_dir() -> Path:
    """Directory holding the config file and, by default, the database."""
    home = os.environ.get("PLUME_HOME")
    if home:
        return Path(home).expanduser()
    return Path.home() / ".config" / "plume"


class Settings(BaseModel):
    """Resolved application settings."""

    db_path: Path = Field(default_factory=lambda: config_dir() / "plume.db")
    export_dir: Path = Field(default_factory=Path.home)
    max_words: int = Field(default=DEFAULT_MAX_WORDS, ge=1, le=200)


def load_settings(config_path: Optional[Path] = None) -> Settings:
    """Load settings from the TOML config file.

    A missing file gives the defaults. An unreadable or invalid file is
    logged and also gives the defaults.
    """
    config_path = config_path or config_dir() / "config.toml"

    if not config_path.exists():
        return Settings()

    try:
        raw = toml.load(config_path)
    except (OSError, toml.TomlDecodeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return Settings()

    values: dict = {}
    storage = raw.get("storage", {})
    if "db_path" in storage:
        values["db_path"] = Path(storage["db_path"]).expanduser()
    export = raw.get("export", {})
    if "directory" in export:
        values["export_dir"] = Path(export["directory"]).expanduser()
    wordcloud = raw.get("wordcloud", {})
    if "max_words" in wordcloud:
        values["max_words"] = wordcloud["max_words"]

    try:
        return Settings(**values)
    except ValidationError as e:
        logger.warning("Ignoring invalid config %s: %s", config_path, e)
        return Settings()
