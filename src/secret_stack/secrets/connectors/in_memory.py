"""In-memory connector for programmatic values and tests."""

import copy
import logging
from typing import Dict, List, Optional

from ...config.exceptions import MissingSecretValueException, SecretNotLoadedException
from ..interface import BaseConnector
from ..models import SecretValue

logger = logging.getLogger(__name__)


class InMemoryConnector(BaseConnector):
    """Serves values from a dict supplied at construction."""

    def __init__(self, values: Optional[Dict[str, SecretValue]] = None):
        super().__init__()
        self._values = dict(values or {})
        self._loaded: Dict[str, SecretValue] = {}

    @property
    def connector_type(self) -> str:
        return 'in-memory'

    def load(self, names: List[str]) -> None:
        for name in names:
            if name not in self._values:
                raise MissingSecretValueException(
                    f"Secret '{name}' not found in in-memory connector",
                    secret_name=name
                )
            self._loaded[name] = copy.deepcopy(self._values[name])
        logger.debug(f"Loaded {len(names)} in-memory secrets")

    def get(self, name: str) -> SecretValue:
        if name not in self._loaded:
            raise SecretNotLoadedException(
                f"Secret '{name}' not loaded. Did you call load()?",
                secret_name=name
            )
        return self._loaded[name]
