"""
Configuration management for the draft clock service
"""
from typing import Dict

from pydantic_settings import BaseSettings, SettingsConfigDict

# Player position constants (static, not configurable)
GUARD = "Guard"
FORWARD = "Forward"
CENTER = "Center"
ALL_POSITIONS = (GUARD, FORWARD, CENTER)


class DraftConfig(BaseSettings):
    """Application configuration with environment variable support."""

    # Persistence API settings
    api_token: str
    db_url: str

    # Redis settings (job queue and real-time broadcast bus)
    redis_url: str = "redis://localhost:6379/0"
    queue_name: str = "draft"
    broadcast_enabled: bool = True

    # API Constants
    api_version: int = 3
    default_timeout: int = 10

    # Draft Constants
    default_pick_time_limit: int = 60     # Seconds allowed per pick
    default_team_size: int = 10           # Players per fantasy team
    min_draft_teams: int = 2              # Teams required before a draft can start
    stall_status: str = "paused"          # Status applied when the player pool runs dry

    # Roster composition minimums
    min_guards: int = 3
    min_forwards: int = 3
    min_centers: int = 2

    # Application settings
    log_level: str = "INFO"
    log_dir: str = "logs"
    environment: str = "development"
    testing: bool = False

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.environment.lower() == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in test mode."""
        return self.testing

    @property
    def position_minimums(self) -> Dict[str, int]:
        """Minimum players per position a finished roster must hold."""
        return {
            GUARD: self.min_guards,
            FORWARD: self.min_forwards,
            CENTER: self.min_centers,
        }


# Global configuration instance - lazily initialized to avoid import-time errors
_config = None

def get_config() -> DraftConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = DraftConfig()  # type: ignore
    return _config
