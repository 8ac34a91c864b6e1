"""
Environment variable connector.

Loads secret values from the process environment, optionally seeded from a
.env file in the project directory.
"""

import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import dotenv_values

from ...config.exceptions import MissingSecretValueException, SecretNotLoadedException
from ..interface import BaseConnector
from ..models import SecretValue
from ..secret_utils import parse_secret_value, validate_secret_name

logger = logging.getLogger(__name__)

DEFAULT_PREFIX = 'SECRET_STACK_SECRET_'


class EnvConnector(BaseConnector):
    """Reads `<prefix><SECRET_NAME>` environment variables.

    Values holding a JSON object are parsed into dicts so that multi-key
    secrets (basic auth, custom types) can be kept in a single variable.
    """

    def __init__(self, prefix: str = DEFAULT_PREFIX, allow_dotenv: bool = True,
                 case_insensitive: bool = False, working_dir: Optional[str] = None,
                 env_file: str = '.env'):
        super().__init__()
        self.prefix = prefix or ''
        self.allow_dotenv = allow_dotenv
        self.case_insensitive = case_insensitive
        self.env_file = env_file
        self._secrets: Dict[str, SecretValue] = {}
        if working_dir is not None:
            self.set_working_dir(working_dir)

    @property
    def connector_type(self) -> str:
        return 'env'

    def _dotenv_path(self) -> Path:
        base = self.working_dir or Path.cwd()
        return base / self.env_file

    def _collect_environment(self) -> Dict[str, str]:
        """Merge .env values under the real process environment."""
        environment: Dict[str, str] = {}
        if self.allow_dotenv:
            dotenv_path = self._dotenv_path()
            if dotenv_path.exists():
                file_values = dotenv_values(dotenv_path)
                environment.update({k: v for k, v in file_values.items() if v is not None})
                logger.debug(f"Loaded {len(environment)} variables from {dotenv_path}")
            else:
                logger.debug(f"No dotenv file at {dotenv_path}")
        environment.update(os.environ)
        return environment

    def _lookup(self, environment: Dict[str, str], env_name: str) -> Optional[str]:
        if env_name in environment:
            return environment[env_name]
        if self.case_insensitive:
            wanted = env_name.lower()
            for key, value in environment.items():
                if key.lower() == wanted:
                    return value
        return None

    def load(self, names: List[str]) -> None:
        environment = self._collect_environment()
        for name in names:
            validate_secret_name(name)
            env_name = f"{self.prefix}{name}"
            raw = self._lookup(environment, env_name)
            if raw is None:
                raise MissingSecretValueException(
                    f"Missing environment variable: {env_name}",
                    secret_name=name,
                    source=env_name
                )
            self._secrets[name] = parse_secret_value(raw)
            logger.debug(f"Loaded secret '{name}' from {env_name}")

    def get(self, name: str) -> SecretValue:
        if name not in self._secrets:
            raise SecretNotLoadedException(
                f"Secret '{name}' not loaded. Did you call load()?",
                secret_name=name
            )
        return self._secrets[name]
