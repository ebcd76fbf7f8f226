"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  -- static defaults and the tenant list
  2. .env file           -- local developer overrides (not committed)
  3. Environment vars    -- set at deploy time

:func:`load_config` reads the YAML file, then deep-merges the
environment-derived values from :class:`Settings` on top.
:func:`load_tenants` turns the ``tenants`` section into
:class:`TenantConfig` objects, filling unset keys and models from the
application-wide defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from localscout.config.settings import Settings
from localscout.config.tenant import RankingConfig, TenantConfig
from localscout.utils.errors import ConfigurationError


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings instance; a fresh one is read from the environment
                  when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path) as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "completion": {
            "available_providers": settings.get_available_completion_providers(),
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def load_tenants(config: dict[str, Any], settings: Settings) -> dict[str, TenantConfig]:
    """Build one :class:`TenantConfig` per entry under ``tenants``.

    Ranking values are layered: the top-level ``ranking`` section first,
    then the tenant's own ``ranking`` section.  Secrets left blank in YAML
    are taken from *settings*.  When the YAML defines no tenants and
    ``DEFAULT_CITY`` is set, a single tenant is synthesised for it.

    Raises
    ------
    ConfigurationError
        If a tenant entry is malformed or has no ``city``.
    """
    raw_tenants = config.get("tenants") or []
    if not raw_tenants and settings.default_city:
        raw_tenants = [{"city": settings.default_city}]

    shared_ranking = dict(config.get("ranking") or {})
    tenants: dict[str, TenantConfig] = {}

    for entry in raw_tenants:
        if not isinstance(entry, dict) or not entry.get("city"):
            raise ConfigurationError(message=f"Tenant entry without a city: {entry!r}")

        ranking = dict(shared_ranking)
        _deep_merge(ranking, dict(entry.get("ranking") or {}))

        values = {k: v for k, v in entry.items() if k != "ranking" and v not in (None, "")}
        values["city"] = str(entry["city"]).strip().lower()
        values.setdefault("openai_api_key", settings.openai_api_key)
        values.setdefault("openai_base_url", settings.openai_base_url)
        values.setdefault("anthropic_api_key", settings.anthropic_api_key)
        values.setdefault("completion_provider", settings.completion_provider)
        values.setdefault("cheap_model", settings.cheap_model)
        values.setdefault("capable_model", settings.capable_model)
        values.setdefault("completion_timeout_seconds", settings.completion_timeout_seconds)

        try:
            tenant = TenantConfig(ranking=RankingConfig(**ranking), **values)
        except ValueError as exc:
            raise ConfigurationError(
                message=f"Invalid tenant configuration for {values['city']}: {exc}"
            ) from exc
        tenants[tenant.city] = tenant

    return tenants
