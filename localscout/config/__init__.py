"""Configuration module: exports Settings, the YAML loader and tenant objects."""

from localscout.config.loader import load_config, load_tenants
from localscout.config.settings import Settings
from localscout.config.tenant import RankingConfig, TenantConfig

__all__ = ["RankingConfig", "Settings", "TenantConfig", "load_config", "load_tenants"]
