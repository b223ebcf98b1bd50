"""Configuration management with lazy validation."""

from pathlib import Path
from functools import cached_property

from blockfence.models.config import Config, EditorConfig, SessionConfig
from blockfence.utils.logging import get_logger


logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".config" / "blockfence" / "config.yaml"


class ConfigManager:
    """
    Configuration manager with lazy section access.

    Every setting has a default, so a missing config file is not an error
    when loading the default location.

    Example:
        >>> config_mgr = ConfigManager.load_default()
        >>> config_mgr.editor.auto_indent
        True
    """

    def __init__(self, config: Config):
        """
        Initialize config manager with loaded config.

        Args:
            config: Loaded and validated Config instance
        """
        self._config = config

    @classmethod
    def load_default(cls) -> "ConfigManager":
        """
        Load configuration from ~/.config/blockfence/config.yaml, if present.

        Returns:
            ConfigManager instance (defaults when the file does not exist)

        Raises:
            ValueError: If config is invalid
        """
        if not DEFAULT_CONFIG_PATH.exists():
            logger.info("config_defaults_used", path=str(DEFAULT_CONFIG_PATH))
            return cls(Config())
        return cls.load_from_path(DEFAULT_CONFIG_PATH)

    @classmethod
    def load_from_path(cls, path: Path) -> "ConfigManager":
        """
        Load configuration from specific path.

        Args:
            path: Path to config.yaml file

        Returns:
            ConfigManager instance with loaded config

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        logger.info("config_loading", path=str(path))

        try:
            config = Config.load(path)
            logger.info("config_loaded", path=str(path))
            return cls(config)

        except FileNotFoundError as e:
            logger.error("config_not_found", path=str(path), error=str(e))
            raise

        except Exception as e:
            logger.error("config_validation_error", path=str(path), error=str(e))
            raise ValueError(f"Configuration validation failed: {e}") from e

    @property
    def config(self) -> Config:
        """The full validated configuration."""
        return self._config

    @cached_property
    def editor(self) -> EditorConfig:
        """Editor configuration."""
        return self._config.editor

    @cached_property
    def session(self) -> SessionConfig:
        """Session driver configuration."""
        return self._config.session
