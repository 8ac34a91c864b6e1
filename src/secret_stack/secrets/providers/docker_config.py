"""Docker registry credentials provider (kubernetes.io/dockerconfigjson)."""

import base64
import json
import logging
from typing import Any, List, Optional

from ...config.exceptions import UnsupportedStrategyException
from ..interface import BaseProvider
from ..models import PreparedEffect, ProviderInjection, SecretValue
from ..secret_utils import require_fields, require_mapping

logger = logging.getLogger(__name__)


class DockerConfigSecretProvider(BaseProvider):
    """Renders a .dockerconfigjson Secret and references it from imagePullSecrets."""

    secret_type = 'kubernetes.io/dockerconfigjson'
    supported_strategies = ['imagePullSecret']

    def __init__(self, name: str, namespace: Optional[str] = None):
        super().__init__(name, namespace)

    @property
    def provider_type(self) -> str:
        return 'docker-config'

    def prepare(self, secret_name: str, value: SecretValue) -> List[PreparedEffect]:
        mapping = require_mapping(value, self.__class__.__name__, secret_name)
        require_fields(mapping, ['username', 'password', 'registry'], self.__class__.__name__, secret_name)
        username = str(mapping['username'])
        password = str(mapping['password'])
        auth = base64.b64encode(f"{username}:{password}".encode('utf-8')).decode('ascii')
        docker_config = {
            'auths': {
                str(mapping['registry']): {
                    'username': username,
                    'password': password,
                    'auth': auth,
                }
            }
        }
        return [self._effect(secret_name, {'.dockerconfigjson': json.dumps(docker_config)})]

    def get_injection_payload(self, injections: List[ProviderInjection]) -> Any:
        for injection in injections:
            if injection.strategy.kind != 'imagePullSecret':
                raise UnsupportedStrategyException(
                    f"{self._label()} Unsupported injection strategy: {injection.strategy.kind}",
                    provider=self.__class__.__name__,
                    secret_name=injection.secret_name,
                    supported=self.supported_strategies
                )
        if not injections:
            return []
        return [{'name': self.name}]
