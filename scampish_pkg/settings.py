#!/usr/bin/env python3
"""
Settings loader for Scampish.
Supports configuration from scampish.yml, scampish.yaml, or scampish.json files.
"""

import os
import json
import yaml
from typing import Dict, Any, Optional

from .errors import ConfigurationError


class ScampishSettings:
    """Load and manage Scampish run settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'bucket': None,
        'type': None,
        'source_dir': 'src',
        'base_url': '/',
        'templates': 'templates/',
        'site_config': 'scampish_config.yaml',
        'endpoint_url': None,
        'log_dir': 'logs',
    }

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['scampish.yml', 'scampish.yaml', 'scampish.json']

    def __init__(self, config_dir: str = None):
        """
        Initialize settings loader.

        Args:
            config_dir: Directory to look for config files. Defaults to current directory.
        """
        self.config_dir = config_dir or os.getcwd()
        self.settings = self.DEFAULT_SETTINGS.copy()
        self.config_file_path = None

    def load_settings(self) -> Dict[str, Any]:
        """
        Load settings from configuration file if it exists.

        Returns:
            Dictionary of configuration settings

        Raises:
            ConfigurationError: If a config file exists but cannot be loaded
        """
        config_file = self._find_config_file()

        if config_file:
            self.config_file_path = config_file
            try:
                loaded_settings = self._load_config_file(config_file)
            except (ValueError, OSError) as e:
                raise ConfigurationError(str(e)) from e
            if loaded_settings:
                # Merge with defaults, giving preference to loaded settings
                self.settings.update(loaded_settings)
                print(f"Loaded configuration from: {os.path.relpath(config_file)}")

        return self.settings.copy()

    def _find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.config_dir, filename)
            if os.path.exists(config_path):
                return config_path
        return None

    def _load_config_file(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from a file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Dictionary of configuration settings
        """
        file_ext = os.path.splitext(config_path)[1].lower()

        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                if file_ext in ['.yml', '.yaml']:
                    data = yaml.safe_load(f) or {}
                elif file_ext == '.json':
                    data = json.load(f) or {}
                else:
                    raise ValueError(f"Unsupported config file format: {file_ext}")
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in configuration file {config_path}: {e}")
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}")
        except (IOError, OSError) as e:
            raise IOError(f"Error reading configuration file {config_path}: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping")
        return data

    def create_sample_config(self, file_format: str = 'yml') -> str:
        """
        Create a sample configuration file.

        Args:
            file_format: Format for config file ('yml', 'yaml', or 'json')

        Returns:
            Path to created sample config file
        """
        sample_config = {
            'bucket': 'my-content-bucket',
            'type': 'test',
            'source_dir': 'src',
            'base_url': '/',
            'templates': 'templates/',
            'site_config': 'scampish_config.yaml',
            'log_dir': 'logs',
        }

        filename = f'scampish.{file_format}'
        config_path = os.path.join(self.config_dir, filename)

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                if file_format in ['yml', 'yaml']:
                    # Custom YAML output with comments
                    f.write("# Scampish Configuration File\n\n")
                    f.write("# Content bucket and the output target to publish to.\n")
                    f.write("# Targets map to buckets in scampish_config.yaml:\n")
                    f.write("#   buckets:\n")
                    f.write("#     test: my-test-site\n")
                    f.write("bucket: my-content-bucket\n")
                    f.write("type: test\n\n")
                    f.write("# Layout of the content bucket\n")
                    f.write("source_dir: src\n")
                    f.write("templates: templates/\n")
                    f.write("site_config: scampish_config.yaml\n\n")
                    f.write("# Public URL the site is served from\n")
                    f.write("base_url: /\n\n")
                    f.write("# S3-compatible endpoint (leave unset for AWS)\n")
                    f.write("# endpoint_url: http://localhost:9000\n\n")
                    f.write("log_dir: logs\n")
                elif file_format == 'json':
                    json.dump(sample_config, f, indent=2)
                else:
                    raise ValueError(f"Unsupported config file format: {file_format}")
        except PermissionError:
            raise PermissionError(f"Permission denied creating configuration file: {config_path}")

        return config_path

    def merge_with_args(self, args_dict: Dict[str, Any]) -> Dict[str, Any]:
        """
        Merge configuration settings with command-line arguments.
        Command-line arguments take precedence over config file settings.

        Args:
            args_dict: Dictionary of command-line arguments

        Returns:
            Merged configuration dictionary
        """
        merged = self.settings.copy()

        # Override with non-None command line arguments
        for key, value in args_dict.items():
            if value is not None:
                merged[key] = value

        return merged
