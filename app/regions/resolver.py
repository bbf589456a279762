"""
Per-region credential resolution.

The region table is turned into an immutable mapping of RegionConfig once at
startup. Resolution is a pure lookup: the caller names the region, and the
resolver hands back its credential pair or refuses. Regions without both an
identifier and a secret are known but unconfigured, and are refused the same
way as unknown regions.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from app.config import Settings
from app.engine.errors import ConfigError
from app.regions.region_table import REGION_TABLE


@dataclass(frozen=True)
class RegionConfig:
    """Merchant credentials for one region."""

    region: str
    key_id: str
    key_secret: str = field(repr=False)  # Never logged or echoed
    currency: str  # Settlement currency

    @property
    def is_configured(self) -> bool:
        return bool(self.key_id) and bool(self.key_secret)


class CredentialResolver:
    """Read-only lookup of region code → RegionConfig."""

    def __init__(self, configs: Mapping[str, RegionConfig]):
        self._configs = MappingProxyType(dict(configs))

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialResolver":
        """Build the table from environment-driven settings."""
        configs = {}
        for region, entry in REGION_TABLE.items():
            suffix = region.lower()
            secret = getattr(settings, f"razorpay_key_secret_{suffix}")
            configs[region] = RegionConfig(
                region=region,
                key_id=getattr(settings, f"razorpay_key_id_{suffix}") or "",
                key_secret=secret.get_secret_value() if secret else "",
                currency=entry["currency"],
            )
        return cls(configs)

    def resolve(self, region: Optional[str]) -> RegionConfig:
        """
        Return the credentials for a region.

        Raises:
            ConfigError: If the region is unknown or missing its identifier
                or secret.
        """
        config = self._configs.get(region) if region else None
        if config is None or not config.is_configured:
            raise ConfigError(region)
        return config

    def regions(self) -> Iterator[RegionConfig]:
        """Every known region, configured or not."""
        return iter(self._configs.values())
