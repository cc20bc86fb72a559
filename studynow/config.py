from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path

# Get the project root directory (parent of studynow folder)
PROJECT_ROOT = Path(__file__).parent.parent

class Settings(BaseSettings):
    """Application configuration loaded from environment variables"""
    model_config = SettingsConfigDict(
        env_file=str(PROJECT_ROOT / ".env"),
        env_prefix="STUDYNOW_",
        extra="ignore",
    )

    database_url: str = f"sqlite:///{PROJECT_ROOT / 'studynow.db'}"
    log_level: str = "WARNING"

    # Schedule engine tuning
    target_slot_count: int = 4  # topics per day the budget is split across
    min_slot_minutes: int = 10
    urgency_horizon_days: float = 30.0  # exam urgency ramps up inside this window
    exam_urgent_threshold: float = 0.66
    default_daily_goal_minutes: int = 60

settings = Settings()
