"""
Application Configuration Module
"""
import sys
from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

# Determine BASE_DIR in a packaging-aware way (works for dev and PyInstaller 'frozen' exe)
if getattr(sys, "frozen", False):
    # Running as a bundled executable (PyInstaller)
    _BASE_DIR = Path(sys.executable).parent
else:
    # Running from source (DEV)
    _BASE_DIR = Path(__file__).resolve().parent.parent.parent


class AppConfig(BaseSettings):
    """Application configuration settings"""

    # Application Info
    APP_NAME: str = "Pomodoro Focus"
    APP_VERSION: str = "0.1.0"
    APP_AUTHOR: str = "Pomodoro Focus Team"

    # Paths
    BASE_DIR: Path = _BASE_DIR
    RESOURCES_DIR: Path = BASE_DIR / "resources"
    SOUNDS_DIR: Path = RESOURCES_DIR / "sounds"
    DATA_DIR: Path = BASE_DIR / "data"
    LOGS_DIR: Path = BASE_DIR / "logs"
    PREFERENCES_FILE: Path = DATA_DIR / "preferences.json"

    # API
    API_BASE_URL: str = Field(
        default="http://localhost:3000",
        description="API base URL for server communication"
    )
    API_TIMEOUT: int = Field(
        default=60,
        description="HTTP timeout in seconds"
    )

    # Timer
    TICK_INTERVAL_MS: int = 1000

    # Sounds
    DEFAULT_SOUND: str = str(SOUNDS_DIR / "notification.mp3")
    SOUND_VOLUME: float = 0.7

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan> - <level>{message}</level>"
    LOG_ROTATION: str = "10 MB"
    LOG_RETENTION: str = "1 month"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="allow",
    )


# Global configuration instance
config = AppConfig()


def get_config() -> AppConfig:
    """Get application configuration instance"""
    return config


def ensure_directories() -> None:
    """Create necessary directories if they don't exist"""
    directories = [
        config.DATA_DIR,
        config.LOGS_DIR,
        config.SOUNDS_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)
