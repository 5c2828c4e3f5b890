from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from platformdirs import user_config_dir
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .board.palette import SHIP_COLORS
from .exceptions import ConfigurationError

logger = logging.getLogger(__name__)

APP_NAME = "pixel-invaders"
ENV_PREFIX = "PIXEL_INVADERS_"
SETTINGS_FILE_ENV = ENV_PREFIX + "SETTINGS"


class GameSettings(BaseModel):
    """Board geometry, timing and difficulty for one game instance.

    Defaults reproduce the original building display: a 4 column board drawn
    two pixels per column, 14 rows below one reserved score row, on a 9x17
    pixel matrix. All times are in seconds.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    # Geometry
    columns: int = Field(4, ge=1, description="Lanes ships and the defender can occupy")
    rows: int = Field(14, ge=2, description="Board rows; the last row is the defender's")
    scale: int = Field(2, ge=1, description="Pixel columns per board column")
    vertical_offset: int = Field(1, ge=0, description="Reserved rows above the board (score row)")
    display_width: int = Field(9, ge=1, description="Physical display width in pixels")
    display_height: int = Field(17, ge=1, description="Physical display height in pixels")
    max_hit_points: int = Field(6, ge=1)

    # Timing
    framerate: float = Field(15.0, gt=0)
    base_anim_step: float = Field(0.8, gt=0, description="Gravity interval before the first kill")
    step_per_level: float = Field(0.1, ge=0)
    min_anim_step: float = Field(0.1, gt=0, description="Lower bound for the gravity interval")
    spawn_step: float = Field(2.0, gt=0)
    level_difference: int = Field(10, ge=1, description="Kills needed per level")
    scroll_step: float = Field(0.05, gt=0)
    end_view_pause: float = Field(2.5, ge=0)
    end_scroll_pause: float = Field(1.5, ge=0)

    # Text
    idle_text: str = "P L A Y"
    gameover_text: str = "SCORE: "
    text_start: int = -10
    text_baseline: int = 12
    end_scroll_tail: int = 8

    # Runtime
    seed: Optional[int] = None
    webhook_url: Optional[str] = None

    @model_validator(mode="after")
    def _fits_display(self) -> "GameSettings":
        if self.pixel_width > self.display_width:
            raise ValueError(
                f"Board is {self.pixel_width} pixels wide ({self.columns} columns x scale {self.scale}) "
                f"but the display is only {self.display_width} wide"
            )
        if self.pixel_height > self.display_height:
            raise ValueError(
                f"Board needs {self.pixel_height} rows ({self.rows} + offset {self.vertical_offset}) "
                f"but the display is only {self.display_height} tall"
            )
        if self.max_hit_points >= len(SHIP_COLORS):
            raise ValueError(f"max_hit_points can be at most {len(SHIP_COLORS) - 1} with the ship palette")
        if self.min_anim_step > self.base_anim_step:
            raise ValueError("min_anim_step must not exceed base_anim_step")
        return self

    # ------------------------ Derived values ------------------------
    @property
    def pixel_width(self) -> int:
        return self.columns * self.scale

    @property
    def pixel_height(self) -> int:
        return self.rows + self.vertical_offset

    @property
    def dt(self) -> float:
        return 1.0 / self.framerate

    @property
    def idle_tail(self) -> float:
        """Gap after the idle text before it restarts: one second of scrolling."""
        return 1.0 / self.scroll_step

    def anim_step_for(self, level: int) -> float:
        return max(self.min_anim_step, self.base_anim_step - self.step_per_level * level)

    def level_for(self, score: int) -> int:
        return score // self.level_difference + 1

    # ------------------------ Construction ------------------------
    @classmethod
    def build(cls, **values: Any) -> "GameSettings":
        """Validate ``values``; invalid settings raise ConfigurationError."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid game settings: {exc}") from exc

    def with_overrides(self, **changes: Any) -> "GameSettings":
        data = self.model_dump()
        data.update({k: v for k, v in changes.items() if v is not None})
        return self.build(**data)


def default_settings_path() -> Path:
    return Path(user_config_dir(APP_NAME)) / "settings.yaml"


def discover_settings_path(env: Mapping[str, str]) -> Optional[Path]:
    env_path = env.get(SETTINGS_FILE_ENV)
    if env_path:
        return Path(env_path).expanduser().resolve()
    path = default_settings_path()
    if path.exists():
        return path
    return None


def read_settings_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise ConfigurationError(f"Settings file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Failed to read settings file {path}: {exc}") from exc
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")
    # Allow grouping keys under sections such as [board] / [timing]
    flat: Dict[str, Any] = {}
    for key, value in raw.items():
        if isinstance(value, dict):
            flat.update(value)
        else:
            flat[key] = value
    logger.debug("Loaded %d settings from %s", len(flat), path)
    return flat


def settings_from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    """Collect ``PIXEL_INVADERS_<FIELD>`` overrides; pydantic coerces the strings."""
    out: Dict[str, Any] = {}
    for name in GameSettings.model_fields:
        value = env.get(ENV_PREFIX + name.upper())
        if value is not None and value != "":
            out[name] = value
    return out


def load_settings(path: Optional[Path | str] = None, env: Optional[Mapping[str, str]] = None) -> GameSettings:
    """Build settings from defaults < YAML file < environment.

    Args:
        path: Explicit settings file; must exist when given. Otherwise the file
            named by PIXEL_INVADERS_SETTINGS, or settings.yaml in the user config
            directory when present.
        env: Environment mapping, defaults to os.environ.

    Raises:
        ConfigurationError: unreadable file or settings that do not fit the display.
    """
    env = os.environ if env is None else env
    data: Dict[str, Any] = {}
    chosen = Path(path).expanduser().resolve() if path is not None else discover_settings_path(env)
    if chosen is not None:
        data.update(read_settings_file(chosen))
    data.update(settings_from_env(env))
    settings = GameSettings.build(**data)
    logger.info(
        "Settings: %dx%d board (scale %d) at %.1f Hz",
        settings.columns,
        settings.rows,
        settings.scale,
        settings.framerate,
    )
    return settings


__all__ = ["GameSettings", "default_settings_path", "load_settings"]
