"""
CharacterVault Configuration

Centralized settings, paths, and constants for the application.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import appdirs


# Application info
APP_NAME = "CharacterVault"
APP_AUTHOR = "CharacterVault"
APP_VERSION = "1.0.0"

# Environment overrides
DATABASE_URL_ENV = "CHARACTERVAULT_DATABASE_URL"
LOG_LEVEL_ENV = "CHARACTERVAULT_LOG_LEVEL"


@dataclass(frozen=True)
class Paths:
    """Application paths."""
    # Data directory (stores database)
    data_dir: Path = Path(appdirs.user_data_dir(APP_NAME, APP_AUTHOR))

    # Config directory (stores user preferences)
    config_dir: Path = Path(appdirs.user_config_dir(APP_NAME, APP_AUTHOR))

    # Cache directory
    cache_dir: Path = Path(appdirs.user_cache_dir(APP_NAME, APP_AUTHOR))

    # Log directory
    log_dir: Path = Path(appdirs.user_log_dir(APP_NAME, APP_AUTHOR))

    @property
    def database(self) -> Path:
        return self.data_dir / "charactervault.db"

    @property
    def settings(self) -> Path:
        return self.config_dir / "settings.json"

    @property
    def log_file(self) -> Path:
        return self.log_dir / "charactervault.log"

    def ensure_directories(self) -> None:
        """Create all required directories."""
        for dir_path in [self.data_dir, self.config_dir, self.cache_dir, self.log_dir]:
            dir_path.mkdir(parents=True, exist_ok=True)


@dataclass(frozen=True)
class TournamentSettings:
    """Tournament defaults offered by setup."""
    # "single" or "double"
    default_format: str = "single"

    # Shuffle entrants before seeding
    shuffle_by_default: bool = True

    # Name used when the user leaves it blank
    default_name: str = "Character Tournament"

    # Minimum entrants for a bracket
    min_participants: int = 2


@dataclass(frozen=True)
class LoggingSettings:
    """Logging configuration."""
    level: str = os.environ.get(LOG_LEVEL_ENV, "INFO")
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

    # Also write to PATHS.log_file
    log_to_file: bool = True


# Singleton instances
PATHS = Paths()
TOURNAMENT_SETTINGS = TournamentSettings()
LOGGING_SETTINGS = LoggingSettings()


def get_database_url() -> str:
    """SQLAlchemy URL of the application database."""
    override = os.environ.get(DATABASE_URL_ENV)
    if override:
        return override
    PATHS.data_dir.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{PATHS.database}"


def configure_logging(level: Optional[str] = None, log_file: Optional[Path] = None) -> None:
    """Set up root logging: console plus an optional log file."""
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file is not None:
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))

    logging.basicConfig(
        level=(level or LOGGING_SETTINGS.level).upper(),
        format=LOGGING_SETTINGS.format,
        handlers=handlers,
        force=True,
    )


def init_config() -> None:
    """Initialize configuration, create required directories, start logging."""
    PATHS.ensure_directories()
    configure_logging(log_file=PATHS.log_file if LOGGING_SETTINGS.log_to_file else None)
