"""
Settings: render and PDF ceilings, image naming, loaded from .doc_convert.json.

Lookup order for the settings file: env DOC_CONVERT_CONFIG; then cwd and its
parents; then the repo root (directory containing pyproject.toml). A missing or
unreadable file yields defaults.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from doc_convert.models import RenderLimits

log = logging.getLogger(__name__)

CONFIG_FILENAME = ".doc_convert.json"
CONFIG_ENV_VAR = "DOC_CONVERT_CONFIG"


class Settings(BaseModel):
    """Tunable ceilings and naming. Unknown keys in the file are ignored."""

    max_output_chars: int | None = Field(
        default=2_000_000, ge=1, description="Ceiling on rendered Markdown/text characters"
    )
    max_output_lines: int | None = Field(
        default=100_000, ge=1, description="Ceiling on rendered Markdown/text lines"
    )
    pdf_max_chars: int = Field(default=50_000, ge=1, description="Characters written into a PDF")
    pdf_max_lines: int = Field(default=1_000, ge=1, description="Lines written into a PDF")
    pdf_max_line_length: int = Field(default=80, ge=8, description="Longer PDF lines are cut with '...'")
    images_dirname: str = Field(default="images", description="Image folder created next to Markdown output")
    default_image_alt: str = Field(default="image", description="Alt text when the source has none")
    image_write_attempts: int = Field(default=2, ge=1, description="Tries per embedded image write")

    model_config = {"extra": "ignore"}

    def render_limits(self) -> RenderLimits:
        return RenderLimits(max_chars=self.max_output_chars, max_lines=self.max_output_lines)


def _find_repo_root() -> Path | None:
    """Walk up from the package dir to a directory containing pyproject.toml or the settings file."""
    start = Path(__file__).resolve().parent
    for parent in [start, *start.parents]:
        if (parent / "pyproject.toml").exists() or (parent / CONFIG_FILENAME).exists():
            return parent
    return None


def find_config_file() -> Path | None:
    """Return the settings file in effect, or None if there is none."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        p = Path(env_path).resolve()
        return p if p.is_file() else None
    for d in [Path.cwd(), *Path.cwd().parents]:
        cf = d / CONFIG_FILENAME
        if cf.is_file():
            return cf.resolve()
    repo = _find_repo_root()
    if repo is not None and (repo / CONFIG_FILENAME).is_file():
        return (repo / CONFIG_FILENAME).resolve()
    return None


def get_config_path() -> Path:
    """Path settings are read from, or written to when none exists yet (env, else cwd)."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path).resolve()
    return find_config_file() or (Path.cwd() / CONFIG_FILENAME).resolve()


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from path (or the discovered file); fall back to defaults on any problem."""
    path = path or find_config_file()
    if path is None:
        return Settings()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning("could not read %s, using defaults: %s", path, e)
        return Settings()
    if not isinstance(data, dict):
        log.warning("%s does not hold a JSON object, using defaults", path)
        return Settings()
    try:
        return Settings.model_validate(data)
    except ValidationError as e:
        log.warning("invalid settings in %s, using defaults: %s", path, e)
        return Settings()


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Write settings as JSON; returns the path written."""
    path = path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(settings.model_dump(), f, indent=2)
    return path


def update_setting(key: str, raw_value: str, path: Path | None = None) -> Settings:
    """
    Set one field from a CLI string ("null" clears optional ceilings) and save.

    Raises KeyError for unknown keys and ValueError for values that fail validation.
    """
    if key not in Settings.model_fields:
        raise KeyError(f"Unknown setting: {key}. Available: {list(Settings.model_fields)}")
    path = path or get_config_path()
    current = load_settings(path) if path.is_file() else Settings()
    data: dict[str, Any] = current.model_dump()
    try:
        value: Any = json.loads(raw_value)
    except json.JSONDecodeError:
        value = raw_value
    data[key] = value
    try:
        settings = Settings.model_validate(data)
    except ValidationError as e:
        raise ValueError(str(e)) from e
    save_settings(settings, path)
    return settings
