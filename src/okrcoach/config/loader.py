"""Configuration loading from CLI and programmatic sources."""

import logging
from pathlib import Path
from dataclasses import replace
from okrcoach.config.settings import (
    Settings, CacheSettings, DetectionSettings, PhaseSettings,
    ProcessingSettings, LoggingSettings, LogLevel, CacheBackend
)
from okrcoach.domain.exceptions import ConfigurationError
from okrcoach.domain.models import Phase

logger = logging.getLogger(__name__)

class ConfigurationLoader:
    """Loads configuration from CLI args and system defaults."""

    def load_from_cli_args(self, args) -> Settings:
        """Load configuration from CLI arguments."""
        try:
            # Start with system defaults
            settings = self.load_defaults()

            # Cache settings updates
            cache_updates = {}
            if getattr(args, 'cache_backend', None):
                try:
                    cache_updates['backend'] = CacheBackend(args.cache_backend)
                except ValueError as e:
                    raise ConfigurationError(
                        f"Unknown cache backend: {args.cache_backend}",
                        config_field="cache.backend"
                    ).add_suggestion(
                        f"Use one of: {', '.join(b.value for b in CacheBackend)}"
                    ) from e
            if getattr(args, 'cache_path', None):
                cache_updates['path'] = Path(args.cache_path)
            if getattr(args, 'cache_ttl', None):
                cache_updates['ttl_seconds'] = float(args.cache_ttl)
            if hasattr(args, 'fresh_cache'):
                cache_updates['fresh'] = bool(args.fresh_cache)

            # Detection settings updates
            detection_updates = {}
            if getattr(args, 'detection_threshold', None) is not None:
                detection_updates['detection_threshold'] = args.detection_threshold
            if getattr(args, 'activation_threshold', None) is not None:
                detection_updates['activation_threshold'] = args.activation_threshold

            # Phase timeout: one limit applied to every non-terminal phase
            phase_updates = {}
            if getattr(args, 'timeout_turns', None):
                phase_updates['timeout_turns'] = {
                    p.value: int(args.timeout_turns) for p in Phase if p is not Phase.COMPLETED
                }

            # Processing settings updates
            processing_updates = {}
            if getattr(args, 'chunk_size', None):
                processing_updates['chunk_size'] = args.chunk_size
            if getattr(args, 'no_progress', False):
                processing_updates['show_progress'] = False

            # Logging settings updates
            logging_updates = {}
            if getattr(args, 'log_file', None):
                logging_updates['file_path'] = Path(args.log_file)
            if getattr(args, 'debug', False):
                logging_updates['level'] = LogLevel.DEBUG

            # Runtime settings
            input_path = getattr(args, 'input', None)
            output_path = getattr(args, 'output', None)
            debug_mode = getattr(args, 'debug', False)
            dry_run = getattr(args, 'dry_run', False)

            # Apply all updates
            return replace(
                settings,
                cache=replace(settings.cache, **cache_updates),
                detection=replace(settings.detection, **detection_updates),
                phases=replace(settings.phases, **phase_updates),
                processing=replace(settings.processing, **processing_updates),
                logging=replace(settings.logging, **logging_updates),
                input_path=Path(input_path) if input_path else None,
                output_path=Path(output_path) if output_path else None,
                debug_mode=bool(debug_mode),
                dry_run=bool(dry_run),
            )

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(
                f"Failed to load configuration from CLI arguments: {str(e)}"
            ) from e

    def load_defaults(self) -> Settings:
        """Load default configuration settings."""
        return Settings(
            cache=CacheSettings(
                backend=CacheBackend.MEMORY,
                ttl_seconds=600,
                max_entries=10_000,
                path=None,
                fresh=False,
            ),
            detection=DetectionSettings(
                detection_threshold=0.3,
                activation_threshold=0.5,
            ),
            phases=PhaseSettings(timeout_turns={}),
            processing=ProcessingSettings(
                chunk_size=200,
                show_progress=True,
            ),
            logging=LoggingSettings(
                level=LogLevel.INFO,
                file_path=None,
                console_output=True,
                format_string="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            ),
            debug_mode=False,
            dry_run=False,
        )

def configure_from_cli(args) -> Settings:
    """Main entry point to configure settings from CLI args."""
    loader = ConfigurationLoader()
    settings = loader.load_from_cli_args(args)
    settings.validate()
    return settings
