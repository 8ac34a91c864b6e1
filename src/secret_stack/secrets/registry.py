"""Connector and provider registry with configuration-driven construction.

Maps the type names used in secret-stack.yaml (`env`, `custom`, ...) to
implementation classes listed in registry.yaml, and builds whole
SecretManager instances from their declarative form.
"""

import importlib
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from ..config.exceptions import (
    ConfigException,
    ProviderConfigException,
    UnknownConnectorException,
    UnknownProviderException,
)
from .interface import BaseConnector, BaseProvider
from .manager import SecretManager

logger = logging.getLogger(__name__)

_registry_config: Optional[Dict[str, Any]] = None


def _load_registry_config() -> Dict[str, Any]:
    """Load type mappings from registry.yaml."""
    global _registry_config
    if _registry_config is not None:
        return _registry_config

    registry_file = Path(__file__).parent / "registry.yaml"
    with open(registry_file, 'r') as f:
        _registry_config = yaml.safe_load(f) or {}
    logger.debug(f"Loaded registry config from {registry_file}")
    return _registry_config


def available_types(section: str) -> list:
    return list(_load_registry_config().get(section, {}).keys())


def _import_class(class_path: str):
    # "module.path.ClassName" -> module.path + ClassName
    module_path, class_name = class_path.rsplit('.', 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)


def _create(section: str, type_name: str, options: Optional[Dict[str, Any]], unknown_exc):
    entries = _load_registry_config().get(section, {})
    if type_name not in entries:
        raise unknown_exc(
            f"Unknown {section[:-1]} type: {type_name}. Available: {list(entries)}",
            available=list(entries)
        )

    class_path = entries[type_name]['class']
    try:
        cls = _import_class(class_path)
    except (ImportError, AttributeError) as e:
        logger.error(f"Failed to import {type_name} {section[:-1]} from {class_path}: {e}")
        raise unknown_exc(f"Could not load {section[:-1]} type '{type_name}': {e}") from e

    try:
        return cls(**(options or {}))
    except ConfigException:
        raise
    except TypeError as e:
        raise ProviderConfigException(
            f"Invalid options for {section[:-1]} type '{type_name}': {e}",
            provider=cls.__name__
        ) from e


def create_connector(type_name: str, options: Optional[Dict[str, Any]] = None) -> BaseConnector:
    """Create a connector instance by registry type name."""
    return _create('connectors', type_name, options, UnknownConnectorException)


def create_provider(type_name: str, options: Optional[Dict[str, Any]] = None) -> BaseProvider:
    """Create a provider instance by registry type name."""
    return _create('providers', type_name, options, UnknownProviderException)


def build_secret_manager(spec: Dict[str, Any]) -> SecretManager:
    """Build a SecretManager from its declarative form.

    Args:
        spec: Mapping with `connectors`, `providers` (name -> {type, options}),
            optional `default_connector` / `default_provider`, and `secrets`
            (list of names or {name, connector, provider} mappings)

    Returns:
        Configured SecretManager
    """
    manager = SecretManager()

    for name, connector_spec in (spec.get('connectors') or {}).items():
        connector_spec = connector_spec or {}
        manager.add_connector(name, create_connector(connector_spec.get('type', name), connector_spec.get('options')))

    for name, provider_spec in (spec.get('providers') or {}).items():
        provider_spec = provider_spec or {}
        manager.add_provider(name, create_provider(provider_spec.get('type', name), provider_spec.get('options')))

    if spec.get('default_connector'):
        manager.set_default_connector(spec['default_connector'])
    if spec.get('default_provider'):
        manager.set_default_provider(spec['default_provider'])

    for secret in spec.get('secrets') or []:
        manager.add_secret(secret)

    manager.validate()
    logger.debug(f"Built secret manager with {len(manager.get_secrets())} secret(s)")
    return manager
