"""Configuration management using Pydantic Settings"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Service
    service_name: str = "opcost-gateway"
    log_level: str = "INFO"

    # Settlement
    default_allocation_key: str = "AREA"  # for expenses submitted without a key
    reject_overlapping_tenancies: bool = False
    max_units_per_property: int = 500  # day cache is units x 366 entries


settings = Settings()
