#!/usr/bin/env python3
"""
Settings loader for Renatic static site generator.
Reads the site configuration from renatic.yaml (or renatic.yml) at the source
root and the configuration of each collection from its config.yaml.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from .errors import ConfigError
from .location import normalize_ext

logger = logging.getLogger('Renatic.Settings')


@dataclass(frozen=True)
class Config:
    """Site-wide configuration, read-only once loaded."""

    base_url: str
    ignore_hidden: bool = True
    ignore_paths: List[str] = field(default_factory=list)
    template_ext: str = 'html'
    target_ext: str = 'html'
    content_ext: str = 'md'
    minify_ext: List[str] = field(default_factory=lambda: ['html', 'htm', 'css', 'js'])


@dataclass(frozen=True)
class CollectionConfig:
    """Configuration of one collection directory."""

    title: str = ''
    description: str = ''
    template: Optional[str] = None
    connections: List[str] = field(default_factory=list)
    rss: Optional[str] = None


def _read_yaml(config_path):
    """Read a YAML mapping from a file. An empty file is an empty mapping."""
    try:
        with open(config_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigError(f"Configuration file not found: {config_path}", stage='config') from e
    except PermissionError as e:
        raise ConfigError(f"Permission denied reading configuration file: {config_path}", stage='config') from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in configuration file {config_path}: {e}", stage='config') from e
    except (IOError, OSError) as e:
        raise ConfigError(f"Error reading configuration file {config_path}: {e}", stage='config') from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {config_path} must contain a mapping", stage='config')
    return data


def _expect(settings, key, types, config_path, optional=False):
    value = settings.get(key)
    if value is None and optional:
        return None
    if not isinstance(value, types):
        names = ' or '.join(t.__name__ for t in (types if isinstance(types, tuple) else (types,)))
        raise ConfigError(
            f"Setting '{key}' in {config_path} must be of type {names}, got {type(value).__name__}",
            stage='config',
        )
    return value


def _expect_str_list(settings, key, config_path):
    value = _expect(settings, key, list, config_path)
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(f"Setting '{key}' in {config_path} must be a list of strings", stage='config')
    return list(value)


class RenaticSettings:
    """Load and manage Renatic configuration settings."""

    # Default configuration
    DEFAULT_SETTINGS = {
        'ignore_hidden': True,
        'ignore': [],
        'template_ext': 'html',
        'target_ext': 'html',
        'content_ext': 'md',
        'minify_ext': ['html', 'htm', 'css', 'js'],
    }

    REQUIRED_SETTINGS = ('base_url',)

    # Config file names to look for (in order of preference)
    CONFIG_FILES = ['renatic.yaml', 'renatic.yml']

    COLLECTION_DEFAULTS = {
        'title': '',
        'description': '',
        'template': None,
        'connections': [],
        'rss': None,
    }

    def __init__(self, source_dir: str):
        """
        Initialize settings loader.

        Args:
            source_dir: Source directory holding the site configuration file.
        """
        self.source_dir = source_dir
        self.config_file_path = None

    def find_config_file(self) -> Optional[str]:
        """
        Find the first available configuration file.

        Returns:
            Path to config file or None if not found
        """
        for filename in self.CONFIG_FILES:
            config_path = os.path.join(self.source_dir, filename)
            if os.path.isfile(config_path):
                return config_path
        return None

    def load_settings(self) -> Config:
        """
        Load the site configuration.

        Returns:
            The validated Config

        Raises:
            ConfigError: If no configuration file exists, it is not valid
                YAML, or a setting is missing or has the wrong type.
        """
        config_file = self.find_config_file()
        if config_file is None:
            raise ConfigError(
                f"No configuration file ({', '.join(self.CONFIG_FILES)}) found in {self.source_dir}",
                stage='config',
            )
        self.config_file_path = config_file

        loaded = _read_yaml(config_file)
        for key in self.REQUIRED_SETTINGS:
            if key not in loaded:
                raise ConfigError(f"Missing required setting '{key}' in {config_file}", stage='config')
        for key in loaded:
            if key not in self.DEFAULT_SETTINGS and key not in self.REQUIRED_SETTINGS:
                logger.warning(f"Unknown setting '{key}' in {os.path.basename(config_file)} is ignored")

        settings = self.DEFAULT_SETTINGS.copy()
        settings.update(loaded)

        ignore_paths = _expect_str_list(settings, 'ignore', config_file)
        # The configuration file itself is never part of the site
        own_name = os.path.basename(config_file)
        if own_name not in ignore_paths:
            ignore_paths.append(own_name)

        config = Config(
            base_url=_expect(settings, 'base_url', str, config_file),
            ignore_hidden=_expect(settings, 'ignore_hidden', bool, config_file),
            ignore_paths=ignore_paths,
            template_ext=normalize_ext(_expect(settings, 'template_ext', str, config_file)).lower(),
            target_ext=normalize_ext(_expect(settings, 'target_ext', str, config_file)),
            content_ext=normalize_ext(_expect(settings, 'content_ext', str, config_file)).lower(),
            minify_ext=[normalize_ext(ext).lower() for ext in _expect_str_list(settings, 'minify_ext', config_file)],
        )
        logger.debug(f"Loaded configuration from: {config_file}")
        return config

    @classmethod
    def load_collection_config(cls, config_path) -> CollectionConfig:
        """
        Load the configuration of a collection.

        Args:
            config_path: Path to the collection's config.yaml

        Returns:
            The validated CollectionConfig
        """
        loaded: Dict[str, Any] = _read_yaml(config_path)
        settings = cls.COLLECTION_DEFAULTS.copy()
        settings.update({key: value for key, value in loaded.items() if value is not None})

        return CollectionConfig(
            title=_expect(settings, 'title', str, config_path),
            description=_expect(settings, 'description', str, config_path),
            template=_expect(settings, 'template', str, config_path, optional=True),
            connections=_expect_str_list(settings, 'connections', config_path),
            rss=_expect(settings, 'rss', str, config_path, optional=True),
        )
