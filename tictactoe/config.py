import logging
import sys
from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="TICTACTOE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Contract
    CONTRACT_NAME: str = "tictactoe"

    # Host storage
    STATE_KEY: str = "state"

    # App config
    DEBUG: bool = False

    @field_validator("CONTRACT_NAME")
    @classmethod
    def validate_contract_name(cls, v: str) -> str:
        if not v or not v.isascii() or "." in v:
            raise ValueError("CONTRACT_NAME must be non-empty ASCII without '.'")
        return v

    @field_validator("STATE_KEY")
    @classmethod
    def validate_state_key(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("STATE_KEY cannot be empty")
        return v


def configure_logging(debug: bool = False) -> None:
    """Configure logging for the application."""
    log_level = logging.DEBUG if debug else logging.INFO
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    logging.basicConfig(
        level=log_level,
        format=log_format,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@lru_cache
def get_settings() -> Settings:
    settings = Settings()
    configure_logging(settings.DEBUG)
    logger.info("Settings loaded successfully")
    logger.debug("Contract name: %s", settings.CONTRACT_NAME)
    logger.debug("State key: %s", settings.STATE_KEY)
    return settings
