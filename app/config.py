"""Application configuration via environment variables."""

import json
from typing import Annotated, Any

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    razorpay_api_base: str = "https://api.razorpay.com/v1"

    # One credential pair per region; a missing pair leaves the region unconfigured
    razorpay_key_id_my: str = ""
    razorpay_key_secret_my: SecretStr = SecretStr("")
    razorpay_key_id_sg: str = ""
    razorpay_key_secret_sg: SecretStr = SecretStr("")
    razorpay_key_id_us: str = ""
    razorpay_key_secret_us: SecretStr = SecretStr("")
    razorpay_key_id_in: str = ""
    razorpay_key_secret_in: SecretStr = SecretStr("")

    gateway_timeout_seconds: float = 30.0
    default_region: str = "MY"  # Used by merchant validation when no region is sent
    environment: str = "local"
    log_level: str = "INFO"
    cors_origins: Annotated[list[str], NoDecode] = ["*"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, value: Any) -> Any:
        """Accept `*`, a comma-separated list, or a JSON array."""
        if not isinstance(value, str):
            return value
        value = value.strip()
        if value.startswith("["):
            return json.loads(value)
        return [origin.strip() for origin in value.split(",") if origin.strip()]


settings = Settings()
