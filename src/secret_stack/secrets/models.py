"""Pydantic models for secrets management.

Defines the injection and effect models that flow between managers,
providers and stacks, plus response models with meta/data separation
for command line output.
"""

import hashlib
import json
from typing import Any, Dict, List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict


SecretValue = Union[str, Dict[str, Union[str, int, float, bool]]]


class InjectionStrategy(BaseModel):
    """How a secret is wired into a workload."""
    kind: Literal['env', 'envFrom', 'imagePullSecret'] = 'env'
    container_index: int = 0
    key: Optional[str] = None
    prefix: Optional[str] = None


class ProviderInjection(BaseModel):
    """A resolved injection directive for one secret into one resource path."""
    model_config = ConfigDict(arbitrary_types_allowed=True)

    provider_id: str
    provider: Any
    resource_id: str
    path: str
    secret_name: str
    target_name: Optional[str] = None
    strategy: InjectionStrategy


class PreparedEffect(BaseModel):
    """A manifest a provider wants to exist for a secret."""
    type: Literal['kubectl'] = 'kubectl'
    provider_name: str
    secret_name: str
    value: Dict[str, Any]
    manager_name: Optional[str] = None


class SecretEntry(BaseModel):
    """A secret registered in a SecretManager."""
    name: str
    connector: Optional[str] = None
    provider: Optional[str] = None


def hash_secret_value(value: SecretValue) -> str:
    """Short sha256 prefix used to fingerprint a value without revealing it."""
    if isinstance(value, dict):
        raw = json.dumps(value, sort_keys=True)
    else:
        raw = str(value)
    return hashlib.sha256(raw.encode()).hexdigest()[:16]


# Response Meta Models
class ErrorInfo(BaseModel):
    """Error information in responses."""
    code: str
    message: str


class SecretsMetaResponse(BaseModel):
    """Meta information for all secrets command responses."""
    success: bool
    operation: Optional[str] = None  # "validate", "list", "apply"
    manager: Optional[str] = None
    error: Optional[ErrorInfo] = None


# Response Data Models
class SecretEntryInfo(BaseModel):
    """Secret registration details (no values)."""
    name: str
    manager: str
    connector: str
    provider: str


class ValidatedSecretInfo(SecretEntryInfo):
    """Secret details after a successful load."""
    keys: List[str] = []
    hash: Optional[str] = None

    @classmethod
    def create(cls, entry: SecretEntryInfo, value: SecretValue) -> 'ValidatedSecretInfo':
        """Build from a registration and its loaded value."""
        keys = sorted(value.keys()) if isinstance(value, dict) else []
        return cls(**entry.model_dump(), keys=keys, hash=hash_secret_value(value))


class SecretManifestInfo(BaseModel):
    """Summary of a rendered Secret manifest."""
    name: str
    namespace: str
    type: str
    keys: List[str] = []

    @classmethod
    def from_manifest(cls, manifest: Dict[str, Any]) -> 'SecretManifestInfo':
        metadata = manifest.get('metadata', {})
        return cls(
            name=metadata.get('name', ''),
            namespace=metadata.get('namespace', 'default'),
            type=manifest.get('type', 'Opaque'),
            keys=list((manifest.get('data') or {}).keys())
        )


# Response Models (meta + data)
class ValidateSecretsResponse(BaseModel):
    """Response from validating secrets."""
    meta: SecretsMetaResponse
    secrets: List[ValidatedSecretInfo] = []


class ListSecretsResponse(BaseModel):
    """Response from listing registered secrets."""
    meta: SecretsMetaResponse
    secrets: List[SecretEntryInfo] = []


class ApplySecretsResponse(BaseModel):
    """Response from applying secrets."""
    meta: SecretsMetaResponse
    manifests: List[SecretManifestInfo] = []
    count: Optional[int] = None
