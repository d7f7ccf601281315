"""Configuration helpers for environment-driven settings."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os
from typing import Any, Mapping

import yaml


class ConfigError(RuntimeError):
    """Raised when a required data source is not configured."""


@dataclass(frozen=True)
class StoreConfig:
    """Connection settings for one Supabase project."""

    label: str
    url: str | None
    key: str | None
    table: str
    url_env: str = ""
    key_env: str = ""
    rpc: str | None = None

    @property
    def configured(self) -> bool:
        return bool(self.url and self.key)

    def require(self) -> "StoreConfig":
        missing = [
            name
            for name, value in ((self.url_env, self.url), (self.key_env, self.key))
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing {self.label} config: {', '.join(missing)}")
        return self


@dataclass(frozen=True)
class RegradeSettings:
    """Job settings loaded from settings.yaml."""

    sports: list[str]
    leagues: dict[str, str]
    timezone: str = "America/New_York"
    changed_sample_limit: int = 500
    max_fetch_workers: int = 4

    def league_for(self, sport: str | None) -> str | None:
        if not sport:
            return None
        return self.leagues.get(str(sport).strip().lower())


@dataclass(frozen=True)
class AppConfig:
    picks_store: StoreConfig
    results_store: StoreConfig
    settings: RegradeSettings = field(default_factory=lambda: default_settings())


_DEFAULT_REGRADE: dict[str, Any] = {
    "sports": ["nba", "ncaab"],
    "leagues": {"nba": "NBA", "ncaab": "NCAAB"},
    "timezone": "America/New_York",
    "changed_sample_limit": 500,
    "max_fetch_workers": 4,
}


def load_config(settings_path: str | os.PathLike[str] = "settings.yaml") -> AppConfig:
    """Load configuration from environment variables and settings.yaml."""

    raw = _load_settings_file(settings_path)

    picks_store = StoreConfig(
        label="main Supabase",
        url=os.getenv("SUPABASE_URL"),
        key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
        table=os.getenv("PICKS_TABLE", "avatar_picks"),
        url_env="SUPABASE_URL",
        key_env="SUPABASE_SERVICE_ROLE_KEY",
        rpc=os.getenv("RECALCULATE_RPC", "recalculate_avatar_performance"),
    )
    results_store = StoreConfig(
        label="CFB Supabase",
        url=os.getenv("CFB_SUPABASE_URL"),
        key=os.getenv("CFB_SUPABASE_ANON_KEY"),
        table=os.getenv("GAME_RESULTS_TABLE", "all_game_results"),
        url_env="CFB_SUPABASE_URL",
        key_env="CFB_SUPABASE_ANON_KEY",
    )

    settings = _build_regrade_settings(raw)
    return AppConfig(picks_store=picks_store, results_store=results_store, settings=settings)


def default_settings() -> RegradeSettings:
    return _build_regrade_settings({})


def _load_settings_file(path: str | os.PathLike[str]) -> Mapping[str, Any]:
    settings_path = Path(path)
    if not settings_path.exists():
        return {}
    raw = settings_path.read_text(encoding="utf-8")
    loaded = yaml.safe_load(raw) or {}
    if not isinstance(loaded, dict):
        raise ConfigError("settings.yaml must contain a mapping")
    return loaded


def _build_regrade_settings(data: Mapping[str, Any]) -> RegradeSettings:
    merged = {**_DEFAULT_REGRADE, **{k: v for k, v in data.items() if k in _DEFAULT_REGRADE}}
    sports = normalize_sports(merged.get("sports") or [])
    leagues_raw = merged.get("leagues") or {}
    if not isinstance(leagues_raw, Mapping):
        raise ConfigError("settings.yaml 'leagues' must be a mapping of sport to league code")
    leagues = {
        str(sport).strip().lower(): str(code).strip().upper()
        for sport, code in leagues_raw.items()
        if str(sport).strip() and str(code).strip()
    }
    return RegradeSettings(
        sports=sports or list(_DEFAULT_REGRADE["sports"]),
        leagues=leagues or dict(_DEFAULT_REGRADE["leagues"]),
        timezone=str(merged["timezone"]),
        changed_sample_limit=max(int(merged["changed_sample_limit"]), 0),
        max_fetch_workers=max(int(merged["max_fetch_workers"]), 1),
    )


def normalize_sports(values: object) -> list[str]:
    """Lowercase, trim and de-blank a list of sport keys, keeping order."""

    if isinstance(values, str):
        values = values.split(",")
    if not isinstance(values, (list, tuple)):
        return []
    sports: list[str] = []
    for value in values:
        token = str(value).strip().lower()
        if token and token not in sports:
            sports.append(token)
    return sports


__all__ = [
    "AppConfig",
    "ConfigError",
    "RegradeSettings",
    "StoreConfig",
    "default_settings",
    "load_config",
    "normalize_sports",
]
