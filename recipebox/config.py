from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

_PACKAGE_DIR = Path(__file__).resolve().parent


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value).expanduser() if value else default


@dataclass(frozen=True)
class AppConfig:
    """
    Runtime configuration for the RecipeBox service.

    storage_dir holds the persisted preference and review blobs; catalog_path
    points at the static recipe catalog shipped with the package.
    """

    storage_dir: Path = field(
        default_factory=lambda: _env_path("RECIPEBOX_STORAGE_DIR", Path.home() / ".recipebox")
    )
    catalog_path: Path = field(
        default_factory=lambda: _env_path("RECIPEBOX_CATALOG_PATH", _PACKAGE_DIR / "data" / "recipes.json")
    )
    log_level: str = field(default_factory=lambda: os.getenv("RECIPEBOX_LOG_LEVEL", "INFO"))
    preferences_key: str = "user_preferences"
    reviews_key: str = "user_reviews"


DEFAULT_APP_CONFIG = AppConfig()
