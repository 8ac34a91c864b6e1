"""
Project configuration loading.

Finds and parses secret-stack.yaml, resolves the stacks and secret managers it
points at, and keeps a process-level cache of secret managers so stack modules
can fetch the configured manager without building their own.
"""
import importlib
import logging
import os
import sys
from collections import OrderedDict
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import ValidationError

from .exceptions import ConfigException, ProjectConfigException
from .models import ProjectConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = 'SECRET_STACK_CONFIG'
CONFIG_FILENAME = 'secret-stack.yaml'

# Module-level cache: config path -> manager name -> SecretManager
_manager_cache: Dict[str, Dict[str, Any]] = {}

# Config file most recently loaded; the default for get_secret_manager()
_active_config_path: Optional[str] = None


def _candidate_paths(path: Optional[str] = None) -> List[Path]:
    if path:
        return [Path(path)]
    candidates = []
    if os.environ.get(CONFIG_ENV_VAR):
        candidates.append(Path(os.environ[CONFIG_ENV_VAR]))
    candidates.extend([
        Path(CONFIG_FILENAME),
        Path('config') / CONFIG_FILENAME,
    ])
    return candidates


def find_config_file(path: Optional[str] = None) -> Path:
    """Locate the project config file.

    Search order: explicit path, $SECRET_STACK_CONFIG, ./secret-stack.yaml,
    ./config/secret-stack.yaml.

    Raises:
        ProjectConfigException: If no candidate exists
    """
    candidates = _candidate_paths(path)
    for candidate in candidates:
        if candidate.exists():
            logger.debug(f"Using project config: {candidate}")
            return candidate
    raise ProjectConfigException(
        "No secret-stack.yaml found",
        searched_paths=[str(c) for c in candidates]
    )


def load_project_config(path: Optional[str] = None) -> ProjectConfig:
    """Load and validate the project config file."""
    global _active_config_path
    config_path = find_config_file(path)
    try:
        with open(config_path, 'r') as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ProjectConfigException(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ProjectConfigException(f"Invalid project config {config_path}: expected a mapping")

    try:
        raw.pop("config_path", None)
        config = ProjectConfig(**raw, config_path=str(config_path))
    except ValidationError as e:
        raise ProjectConfigException(f"Invalid project config {config_path}: {e}") from e

    _active_config_path = str(Path(config_path).resolve())
    logger.debug(f"Loaded project config from {config_path}")
    return config


def import_object(import_path: str, base_dir: Optional[Path] = None) -> Any:
    """Import `package.module:attr` (or `package.module.attr`).

    The project directory is put on sys.path so project-local modules resolve.
    """
    if ':' in import_path:
        module_path, attr_path = import_path.split(':', 1)
    elif '.' in import_path:
        module_path, attr_path = import_path.rsplit('.', 1)
    else:
        raise ProjectConfigException(f"Invalid import path '{import_path}': expected 'module:attr'")

    if base_dir is not None and str(base_dir) not in sys.path:
        sys.path.insert(0, str(base_dir))

    try:
        obj = importlib.import_module(module_path)
    except ImportError as e:
        raise ProjectConfigException(f"Cannot import module '{module_path}': {e}") from e

    for attr in attr_path.split('.'):
        try:
            obj = getattr(obj, attr)
        except AttributeError as e:
            raise ProjectConfigException(f"Module '{module_path}' has no attribute '{attr_path}'") from e
    return obj


def resolve_secret_managers(config: ProjectConfig) -> Dict[str, Any]:
    """Resolve every secret manager declared in the config.

    Returns:
        manager name -> SecretManager (a single `manager` is named 'default')
    """
    from ..secrets.manager import SecretManager
    from ..secrets.registry import build_secret_manager

    managers: Dict[str, Any] = OrderedDict()
    if config.secret.manager:
        managers['default'] = import_object(config.secret.manager, config.base_dir)

    for name, declaration in config.secret.managers.items():
        if name in managers:
            raise ProjectConfigException(f"Secret manager '{name}' declared twice")
        if isinstance(declaration, str):
            managers[name] = import_object(declaration, config.base_dir)
        elif isinstance(declaration, dict):
            managers[name] = build_secret_manager(declaration)
        else:
            raise ProjectConfigException(
                f"Secret manager '{name}' must be an import path or a mapping, got {type(declaration).__name__}"
            )

    for name, manager in managers.items():
        if not isinstance(manager, SecretManager):
            raise ProjectConfigException(f"Secret manager '{name}' is not a SecretManager: {manager!r}")
        manager.set_working_dir(config.base_dir, override=False)

    return managers


def resolve_stacks(config: ProjectConfig) -> Dict[str, Any]:
    """Resolve the stacks import path to a name -> Stack mapping."""
    from ..manifests.stack import Stack

    if not config.stacks:
        return OrderedDict()

    stacks = import_object(config.stacks, config.base_dir)
    if callable(stacks) and not isinstance(stacks, dict):
        stacks = stacks()
    if isinstance(stacks, (list, tuple)):
        stacks = OrderedDict((stack.name, stack) for stack in stacks)
    if not isinstance(stacks, dict):
        raise ProjectConfigException(f"'{config.stacks}' must be a dict of stacks, got {type(stacks).__name__}")

    for name, stack in stacks.items():
        if not isinstance(stack, Stack):
            raise ProjectConfigException(f"Stack '{name}' is not a Stack: {stack!r}")
    return stacks


def get_secret_manager(name: str = 'default', config_path: Optional[str] = None):
    """Get a configured secret manager with process-level caching.

    Raises:
        ProjectConfigException: If the config or the named manager is missing
    """
    config_file = str(find_config_file(config_path or _active_config_path).resolve())
    if config_file not in _manager_cache:
        config = load_project_config(config_file)
        _manager_cache[config_file] = resolve_secret_managers(config)

    managers = _manager_cache[config_file]
    if name not in managers:
        raise ProjectConfigException(
            f"Secret manager '{name}' not found. Available: {list(managers)}"
        )
    return managers[name]


def clear_secret_manager_cache():
    """Clear the manager cache (useful for testing)."""
    global _active_config_path
    _active_config_path = None
    _manager_cache.clear()
    logger.debug("Secret manager cache cleared")


__all__ = [
    'ConfigException',
    'find_config_file',
    'load_project_config',
    'import_object',
    'resolve_secret_managers',
    'resolve_stacks',
    'get_secret_manager',
    'clear_secret_manager_cache',
]
