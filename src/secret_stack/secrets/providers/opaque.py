"""Opaque Secret provider: one string value per key."""

import logging
from typing import Any, List, Optional

from ..interface import BaseProvider
from ..models import PreparedEffect, ProviderInjection, SecretValue
from ..secret_utils import require_string
from .payloads import env_or_env_from_payload, secret_key_ref_env

logger = logging.getLogger(__name__)


class OpaqueSecretProvider(BaseProvider):
    """Stores each secret as a key (named after the secret) of an Opaque Secret.

    Env injection defaults the variable name and the Secret key to the
    secret name, so `c.secrets('DB_PASSWORD').inject()` needs no options.
    """

    secret_type = 'Opaque'
    supported_strategies = ['env', 'envFrom']

    def __init__(self, name: str, namespace: Optional[str] = None):
        super().__init__(name, namespace)

    @property
    def provider_type(self) -> str:
        return 'opaque'

    def prepare(self, secret_name: str, value: SecretValue) -> List[PreparedEffect]:
        text = require_string(value, self.__class__.__name__, secret_name)
        return [self._effect(secret_name, {secret_name: text})]

    def get_injection_payload(self, injections: List[ProviderInjection]) -> Any:
        return env_or_env_from_payload(
            self, injections,
            lambda i: secret_key_ref_env(i.target_name or i.secret_name, self.name, i.strategy.key or i.secret_name)
        )
