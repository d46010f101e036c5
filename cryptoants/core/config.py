"""cryptoants.core.config

Three config surfaces only:
1) `config/default.yaml` + `config/presets/*.yaml`
2) Environment variables (`CRYPTOANTS_` prefix, `__` for nesting)
3) Constructor keyword arguments (tests)

Economy constants are fixed when the engine is built. Changing config later does not
reprice a running colony.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

from cryptoants.core.exceptions import ConfigError

PresetName = Literal["classic", "gentle", "harsh", "custom"]


def _deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = dict(base)
    for k, v in overlay.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Config file is not valid YAML: {path}: {e}") from e
    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a mapping: {path}")
    return raw


class EconomyConfig(BaseModel):
    """Prices in wei, durations in seconds."""

    engine_address: str = "cryptoants"
    egg_price: int = 10**16  # 0.01 ether
    ant_sale_price: int = 4 * 10**15  # 0.004 ether
    lay_cooldown_seconds: int = 600
    cooldown_from_birth: bool = False
    min_eggs_per_lay: int = 1
    max_eggs_per_lay: int = 20
    death_chance: float = 0.05

    @field_validator("egg_price", "ant_sale_price")
    @classmethod
    def prices_must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("prices must be > 0")
        return v

    @field_validator("lay_cooldown_seconds")
    @classmethod
    def cooldown_cannot_be_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError("lay_cooldown_seconds must be >= 0")
        return v

    @field_validator("min_eggs_per_lay")
    @classmethod
    def min_eggs_at_least_one(cls, v: int) -> int:
        if v < 1:
            raise ValueError("min_eggs_per_lay must be >= 1")
        return v

    @field_validator("death_chance")
    @classmethod
    def death_chance_is_probability(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError("death_chance must be within [0, 1]")
        return v

    @field_validator("engine_address")
    @classmethod
    def engine_address_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("engine_address must not be empty")
        return v

    @model_validator(mode="after")
    def yield_range_is_ordered(self) -> EconomyConfig:
        if self.max_eggs_per_lay < self.min_eggs_per_lay:
            raise ValueError(
                f"max_eggs_per_lay ({self.max_eggs_per_lay}) < min_eggs_per_lay ({self.min_eggs_per_lay})"
            )
        return self


class SimulationConfig(BaseModel):
    seed: int | None = None
    start_time: int = 1_600_000_000
    player_address: str = "0xplayer"
    player_funding: int = 10**18  # 1 ether
    max_cycles: int = 1000
    target_ants: int = 100

    @field_validator("max_cycles", "target_ants")
    @classmethod
    def must_be_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("must be >= 1")
        return v


class LoggingConfig(BaseModel):
    level: str = "INFO"
    json_output: bool = False


class Config(BaseSettings):
    """Root configuration. Single source of truth."""

    config_dir: Path = Path("config")

    preset: PresetName = "classic"

    economy: EconomyConfig = Field(default_factory=EconomyConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"env_prefix": "CRYPTOANTS_", "env_nested_delimiter": "__"}

    @classmethod
    def from_yaml(cls, path: Path) -> Config:
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")

        raw = _load_yaml(path)

        preset_name = raw.get("preset", "classic")
        preset_path = path.parent / "presets" / f"{preset_name}.yaml"
        if preset_path.exists():
            raw = _deep_merge(_load_yaml(preset_path), raw)

        raw.setdefault("config_dir", path.parent)
        try:
            return cls(**raw)
        except ValueError as e:
            raise ConfigError(f"Invalid config in {path}: {e}") from e

    @classmethod
    def from_repo_defaults(cls, repo_root: Path | None = None) -> Config:
        root = repo_root or Path.cwd()
        return cls.from_yaml(root / "config" / "default.yaml")

    @classmethod
    def from_preset(
        cls,
        preset: Literal["classic", "gentle", "harsh"],
        *,
        repo_root: Path | None = None,
    ) -> Config:
        root = repo_root or Path.cwd()
        default_path = root / "config" / "default.yaml"
        if not default_path.exists():
            raise ConfigError(f"Config file not found: {default_path}")
        preset_path = default_path.parent / "presets" / f"{preset}.yaml"
        if not preset_path.exists():
            raise ConfigError(f"Preset not found: {preset_path}")

        raw = _load_yaml(default_path)
        raw["preset"] = preset
        # Same chain as from_yaml, without requiring a temp file.
        raw = _deep_merge(_load_yaml(preset_path), raw)
        raw.setdefault("config_dir", default_path.parent)
        try:
            return cls(**raw)
        except ValueError as e:
            raise ConfigError(f"Invalid config for preset {preset}: {e}") from e
