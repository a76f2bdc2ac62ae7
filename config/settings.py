"""
Configuration management using Pydantic Settings.
"""

import logging
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

from pydantic import AnyHttpUrl, Field, TypeAdapter, ValidationError, validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from config.channels import DEFAULT_CHANNELS
from models.channel import MonitorConfig, MonitoredChannel

DEFAULT_MESSAGE_TEMPLATE = "New video from **{channel}**: {title}\n{url}"

_HTTP_URL = TypeAdapter(AnyHttpUrl)


class ConfigurationError(Exception):
    """Required configuration is missing or invalid."""
    pass


class Settings(BaseSettings):
    """Application settings with validation."""

    model_config = SettingsConfigDict(
        env_prefix="YTBOT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Required inputs
    gc_api_key: str = Field(..., description="Google Cloud API key for the YouTube Data API v3")
    dbfile: str = Field(..., description="Path to sqlite3 file for storage")
    webhook: str = Field(..., description="Discord webhook for posting videos")

    # Channels to monitor
    channels: List[MonitoredChannel] = Field(
        default_factory=lambda: list(DEFAULT_CHANNELS),
        description="Monitored channels as a JSON list of {name, channel_id}"
    )

    # Scheduling and retention
    recheck_interval_hours: float = Field(12, gt=0, description="Minimum time between scans of one channel")
    lookback_hours: float = Field(48, gt=0, description="How far back each search looks for uploads")
    announcement_retention_days: float = Field(30, gt=0, description="How long announced videos are remembered")
    poll_interval_minutes: int = Field(60, ge=1, description="Cycle interval in watch mode")

    # Rate limiting
    item_delay_seconds: float = Field(10, ge=0, description="Delay between searches and processed items")
    max_results_per_search: int = Field(5, ge=1, le=50, description="Search page size")
    request_timeout_seconds: float = Field(30, gt=0, description="HTTP timeout for API and webhook calls")

    # Message formatting
    message_template: str = Field(
        DEFAULT_MESSAGE_TEMPLATE,
        description="Template with {channel}, {title}, {video_id} and {url} fields"
    )

    # Logging Configuration
    log_level: str = Field("INFO", description="Logging level")
    log_file: Optional[str] = Field(None, description="Optional log file path")

    @validator('gc_api_key', 'dbfile', 'webhook')
    def validate_required_text(cls, v):
        """Reject blank required values."""
        if not v or not v.strip():
            raise ValueError('value must not be empty')
        return v.strip()

    @validator('webhook')
    def validate_webhook(cls, v):
        """Require an absolute http(s) URL."""
        try:
            _HTTP_URL.validate_python(v)
        except ValidationError as e:
            raise ValueError(f'webhook is not a valid http(s) URL: {e.errors()[0]["msg"]}')
        return v

    @validator('log_level')
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @validator('message_template')
    def validate_message_template(cls, v):
        """Make sure the template renders with the known fields."""
        try:
            v.format(channel="", title="", video_id="", url="")
        except (AttributeError, KeyError, IndexError, ValueError) as e:
            raise ValueError(f'message_template is not a valid template: {e}')
        return v

    @property
    def database_url(self) -> str:
        """SQLAlchemy async URL for the ledger file."""
        return f"sqlite+aiosqlite:///{self.dbfile}"

    def to_monitor_config(self) -> MonitorConfig:
        """Build the immutable runtime configuration."""
        return MonitorConfig(
            channels=tuple(self.channels),
            recheck_interval=timedelta(hours=self.recheck_interval_hours),
            lookback=timedelta(hours=self.lookback_hours),
            announcement_retention=timedelta(days=self.announcement_retention_days),
            item_delay_seconds=self.item_delay_seconds,
            max_results_per_search=self.max_results_per_search,
        )

    def setup_logging(self) -> None:
        """Setup logging configuration."""
        handlers = [logging.StreamHandler()]

        if self.log_file:
            # Create logs directory if it doesn't exist
            log_path = Path(self.log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(self.log_file, encoding='utf-8'))

        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            handlers=handlers
        )

        # Set specific logger levels
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("httpcore").setLevel(logging.WARNING)
        logging.getLogger("sqlalchemy").setLevel(logging.WARNING)
        logging.getLogger("aiosqlite").setLevel(logging.WARNING)
        logging.getLogger("apscheduler").setLevel(logging.WARNING)


def load_settings(**overrides) -> Settings:
    """
    Load settings from the environment and validate them.

    Raises:
        ConfigurationError: If a required value is missing or invalid
    """
    try:
        settings = Settings(**overrides)
        settings.to_monitor_config()
    except (ValidationError, ValueError) as e:
        raise ConfigurationError(str(e)) from e
    return settings
