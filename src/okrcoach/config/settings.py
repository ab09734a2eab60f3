"""Core configuration settings for okrcoach."""

import logging
from pathlib import Path
from typing import Optional, Dict
from dataclasses import dataclass, field
from enum import Enum

from okrcoach.domain.exceptions import ConfigurationError
from okrcoach.domain.models import Phase

logger = logging.getLogger(__name__)

class LogLevel(Enum):
    """Supported logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

class CacheBackend(Enum):
    """Where scores are cached between calls."""
    NONE = "none"
    MEMORY = "memory"
    SQLITE = "sqlite"

@dataclass
class CacheSettings:
    """Score cache configuration."""
    backend: CacheBackend = CacheBackend.MEMORY
    ttl_seconds: Optional[float] = 600
    max_entries: int = 10_000
    path: Optional[Path] = None
    fresh: bool = False

    def validate(self) -> None:
        """Validate cache settings."""
        if self.ttl_seconds is not None and self.ttl_seconds <= 0:
            raise ConfigurationError(
                "ttl_seconds must be positive (or None for no expiry)",
                config_field="cache.ttl_seconds"
            )

        if self.max_entries <= 0:
            raise ConfigurationError(
                "max_entries must be positive",
                config_field="cache.max_entries"
            )

        if self.path and not self.path.parent.exists():
            raise ConfigurationError(
                f"Cache directory does not exist: {self.path.parent}",
                config_field="cache.path"
            ).add_suggestion("Create the directory or use a different path")

        if self.path and self.backend is not CacheBackend.SQLITE:
            logger.warning("cache.path is ignored for the %s backend", self.backend.value)

@dataclass
class DetectionSettings:
    """Anti-pattern detection thresholds."""
    detection_threshold: float = 0.3
    activation_threshold: float = 0.5

    def validate(self) -> None:
        """Validate detection settings."""
        for name in ("detection_threshold", "activation_threshold"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigurationError(
                    f"{name} must lie in [0, 1], got {value}",
                    config_field=f"detection.{name}"
                )

        if self.activation_threshold < self.detection_threshold:
            raise ConfigurationError(
                "activation_threshold cannot be below detection_threshold",
                config_field="detection.activation_threshold"
            ).add_suggestion("Raise activation_threshold or lower detection_threshold")

@dataclass
class PhaseSettings:
    """Phase timeout configuration. An empty mapping disables timeouts."""
    timeout_turns: Dict[str, int] = field(default_factory=dict)

    def validate(self) -> None:
        """Validate phase settings."""
        valid = {p.value for p in Phase}
        for phase, turns in self.timeout_turns.items():
            if phase not in valid:
                raise ConfigurationError(
                    f"Unknown phase in timeout_turns: {phase}",
                    config_field="phases.timeout_turns"
                ).add_suggestion(f"Use one of: {', '.join(sorted(valid))}")
            if turns < 0:
                raise ConfigurationError(
                    f"Timeout for {phase} must be non-negative",
                    config_field="phases.timeout_turns"
                )

    @property
    def timeouts_enabled(self) -> bool:
        return any(turns > 0 for turns in self.timeout_turns.values())

@dataclass
class ProcessingSettings:
    """Batch processing configuration."""
    chunk_size: int = 200
    show_progress: bool = True

    def validate(self) -> None:
        """Validate processing settings."""
        if self.chunk_size <= 0:
            raise ConfigurationError(
                "chunk_size must be positive",
                config_field="processing.chunk_size"
            )

@dataclass
class LoggingSettings:
    """Logging configuration."""
    level: LogLevel = LogLevel.INFO
    file_path: Optional[Path] = None
    console_output: bool = True
    format_string: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def validate(self) -> None:
        """Validate logging settings."""
        if self.file_path and not self.file_path.parent.exists():
            raise ConfigurationError(
                f"Log directory does not exist: {self.file_path.parent}",
                config_field="logging.file_path"
            ).add_suggestion("Create the directory or use console logging only")

@dataclass
class Settings:
    """Main configuration settings for okrcoach."""

    # Core settings
    cache: CacheSettings = field(default_factory=CacheSettings)
    detection: DetectionSettings = field(default_factory=DetectionSettings)
    phases: PhaseSettings = field(default_factory=PhaseSettings)
    processing: ProcessingSettings = field(default_factory=ProcessingSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    # Runtime settings
    input_path: Optional[Path] = None
    output_path: Optional[Path] = None

    # Debug/development settings
    debug_mode: bool = False
    dry_run: bool = False

    def validate(self) -> None:
        """Validate all configuration settings."""
        try:
            self.cache.validate()
            self.detection.validate()
            self.phases.validate()
            self.processing.validate()
            self.logging.validate()

            # Cross-validation
            self._validate_io_paths()

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Configuration validation failed: {str(e)}"
            ) from e

    def _validate_io_paths(self) -> None:
        """Validate batch input/output paths when they are set."""
        if self.input_path is not None and not self.input_path.is_file():
            raise ConfigurationError(
                f"Input file does not exist: {self.input_path}",
                config_field="input_path"
            ).add_suggestion("Pass a JSON file containing a list of OKR sets")

        if self.output_path is not None and not self.output_path.parent.exists():
            raise ConfigurationError(
                f"Output directory does not exist: {self.output_path.parent}",
                config_field="output_path"
            ).add_suggestion("Create the directory or use a different path")

    def to_dict(self) -> dict:
        """Convert settings to dictionary for debugging."""
        return {
            'cache': {
                'backend': self.cache.backend.value,
                'ttl_seconds': self.cache.ttl_seconds,
                'max_entries': self.cache.max_entries,
                'path': str(self.cache.path) if self.cache.path else None,
                'fresh': self.cache.fresh,
            },
            'detection': {
                'detection_threshold': self.detection.detection_threshold,
                'activation_threshold': self.detection.activation_threshold,
            },
            'phases': {
                'timeout_turns': dict(self.phases.timeout_turns),
            },
            'processing': {
                'chunk_size': self.processing.chunk_size,
                'show_progress': self.processing.show_progress,
            },
            'runtime': {
                'input_path': str(self.input_path) if self.input_path else None,
                'output_path': str(self.output_path) if self.output_path else None,
                'debug_mode': self.debug_mode,
                'dry_run': self.dry_run,
            }
        }

# Global settings instance
_settings: Optional[Settings] = None

def get_settings() -> Settings:
    """Get the current global settings instance."""
    global _settings
    if _settings is None:
        raise ConfigurationError(
            "Settings not initialized. Call set_settings() first."
        ).add_suggestion("Initialize settings in your application startup")
    return _settings

def set_settings(settings: Settings) -> None:
    """Set the global settings instance."""
    global _settings
    settings.validate()  # Validate before setting
    _settings = settings
    logger.info("Configuration loaded and validated successfully")

def reset_settings() -> None:
    """Forget the global settings instance."""
    global _settings
    _settings = None
