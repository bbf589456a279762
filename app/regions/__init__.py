from app.regions.region_table import REGION_TABLE, SUPPORTED_REGIONS
from app.regions.resolver import CredentialResolver, RegionConfig

__all__ = ["REGION_TABLE", "SUPPORTED_REGIONS", "CredentialResolver", "RegionConfig"]
