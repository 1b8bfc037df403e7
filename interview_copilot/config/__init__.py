"""Simple YAML configuration loader for the interview copilot."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any
import logging

from ..recognition.adapter import RecognitionConfig
from ..services.copilot_service import DetectionSettings

logger = logging.getLogger(__name__)


class CopilotConfig:
    """Interview copilot configuration loader."""

    def __init__(self, config_path: str):
        """Initialize configuration loader.

        Args:
            config_path: Path to YAML config file
        """
        self.config_file = Path(config_path)

        if not self.config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_file}")

        logger.info(f"Loading configuration from: {self.config_file}")
        self.config = self._load_config()

    def _load_config(self) -> Dict[str, Any]:
        """Load and parse YAML configuration file."""
        try:
            with open(self.config_file, 'r', encoding='utf-8') as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file: {e}")

        if not config:
            raise ValueError("Configuration file is empty")

        self._resolve_paths(config)

        logger.info("Configuration loaded successfully")
        return config

    def _resolve_paths(self, config: Dict[str, Any]) -> None:
        """Resolve relative paths in configuration relative to config file location."""
        config_dir = self.config_file.parent

        for section, key in (("google_cloud", "credentials_path"),
                             ("storage", "data_directory"),
                             ("logging", "file_path")):
            value = (config.get(section) or {}).get(key)
            if value and not os.path.isabs(value):
                config[section][key] = str(config_dir / value)

    def get(self, key_path: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'recognition.language')."""
        keys = key_path.split('.')
        value = self.config

        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default

        return value

    def set(self, key_path: str, value: Any) -> None:
        """Set configuration value using dot notation."""
        keys = key_path.split('.')
        config_dict = self.config

        for key in keys[:-1]:
            if key not in config_dict:
                config_dict[key] = {}
            config_dict = config_dict[key]

        config_dict[keys[-1]] = value
        logger.debug(f"Configuration key '{key_path}' set to: {value}")

    def get_recognition_config(self) -> RecognitionConfig:
        defaults = RecognitionConfig()
        return RecognitionConfig(
            language=self.get('recognition.language', defaults.language),
            continuous=self.get('recognition.continuous', defaults.continuous),
            interim_results=self.get('recognition.interim_results', defaults.interim_results),
            silence_threshold_ms=self.get('recognition.silence_threshold_ms', 2500),
            poll_interval_ms=self.get('recognition.poll_interval_ms', defaults.poll_interval_ms),
            max_restart_attempts=self.get('recognition.max_restart_attempts', defaults.max_restart_attempts),
            restart_delay_ms=self.get('recognition.restart_delay_ms', defaults.restart_delay_ms),
        )

    def get_detection_settings(self) -> DetectionSettings:
        defaults = DetectionSettings()
        return DetectionSettings(
            local_threshold=self.get('detection.local_threshold', defaults.local_threshold),
            remote_threshold=self.get('detection.remote_threshold', defaults.remote_threshold),
            silence_flush_ms=self.get('detection.silence_flush_ms', defaults.silence_flush_ms),
            min_flush_length=self.get('detection.min_flush_length', defaults.min_flush_length),
            min_sentence_length=self.get('detection.min_sentence_length', defaults.min_sentence_length),
            queue_size=self.get('detection.queue_size', defaults.queue_size),
        )

    def get_openai_api_key(self) -> str:
        """OpenAI API key from config or OPENAI_API_KEY - CRASHES if neither is set."""
        api_key = self.get('openai.api_key') or os.environ.get('OPENAI_API_KEY')
        if not api_key:
            raise ValueError("OpenAI API key not configured (openai.api_key or OPENAI_API_KEY)")
        return api_key

    def get_google_credentials_path(self) -> str:
        """Get Google credentials path - CRASHES if not found."""
        creds_path = self.get('google_cloud.credentials_path')
        if not creds_path:
            raise ValueError("Google credentials path not configured")

        creds_file = Path(creds_path)
        if not creds_file.exists():
            raise FileNotFoundError(f"Google credentials file not found: {creds_path}")

        return str(creds_file.absolute())

    def get_data_directory(self) -> str:
        """Get data directory path."""
        data_dir = self.get('storage.data_directory', 'data')
        return str(Path(data_dir).absolute())
