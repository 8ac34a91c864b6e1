"""
Google Cloud Secret Manager connector.

Reads secret payloads from Secret Manager so Kubernetes Secrets can be
rendered from values that never touch a local file.
"""

import logging
import os
from typing import Dict, List, Optional

from ...config.exceptions import (
    MissingSecretValueException,
    ProjectIdRequiredException,
    SecretNotLoadedException,
)
from ..interface import BaseConnector
from ..models import SecretValue
from ..secret_utils import parse_secret_value, validate_secret_name

logger = logging.getLogger(__name__)


class GoogleSecretManagerConnector(BaseConnector):
    """Loads secrets from Google Cloud Secret Manager."""

    def __init__(self, project_id: Optional[str] = None, name_map: Optional[Dict[str, str]] = None,
                 version: str = 'latest', client=None):
        super().__init__()
        self._project_id = project_id
        self.name_map = dict(name_map or {})
        self.version = version
        self._client = client
        self._secrets: Dict[str, SecretValue] = {}

    @property
    def connector_type(self) -> str:
        return 'google'

    @property
    def project_id(self) -> Optional[str]:
        return self._project_id or os.getenv('PROJECT_ID')

    def _get_client(self):
        if self._client is None:
            from google.cloud import secretmanager
            logger.debug("Creating SecretManagerServiceClient")
            self._client = secretmanager.SecretManagerServiceClient()
        return self._client

    def secret_id_for(self, name: str) -> str:
        """Map a secret name to its Secret Manager id (API_KEY -> api-key)."""
        if name in self.name_map:
            return self.name_map[name]
        return name.lower().replace('_', '-')

    def load(self, names: List[str]) -> None:
        if not names:
            return
        project_id = self.project_id
        if not project_id:
            raise ProjectIdRequiredException(
                "Google Secret Manager connector requires a project id",
                secret_name=names[0]
            )

        from google.api_core.exceptions import NotFound

        client = self._get_client()
        for name in names:
            validate_secret_name(name)
            secret_path = f"projects/{project_id}/secrets/{self.secret_id_for(name)}/versions/{self.version}"
            logger.debug(f"Accessing secret path: {secret_path}")
            try:
                response = client.access_secret_version(request={"name": secret_path})
            except NotFound as e:
                raise MissingSecretValueException(
                    f"Secret not found in Google Secret Manager: {secret_path}",
                    secret_name=name
                ) from e
            raw = response.payload.data.decode("UTF-8")
            self._secrets[name] = parse_secret_value(raw)
            logger.debug(f"Loaded secret '{name}' (length: {len(raw)})")

    def get(self, name: str) -> SecretValue:
        if name not in self._secrets:
            raise SecretNotLoadedException(
                f"Secret '{name}' not loaded. Did you call load()?",
                secret_name=name
            )
        return self._secrets[name]
