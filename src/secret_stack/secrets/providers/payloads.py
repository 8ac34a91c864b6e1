"""
Injection payload builders shared by the Kubernetes Secret providers.
"""

from typing import Any, Callable, Dict, List, Optional

from ...config.exceptions import (
    KeyNotAllowedException,
    MissingKeyParameterException,
    MissingTargetNameException,
    ProviderConfigException,
    UnsupportedStrategyException,
)
from ..models import ProviderInjection


def secret_key_ref_env(target_name: str, secret_name: str, key: str) -> Dict[str, Any]:
    """Container env entry that reads one key of a Secret."""
    return {
        'name': target_name,
        'valueFrom': {
            'secretKeyRef': {
                'name': secret_name,
                'key': key,
            }
        }
    }


def secret_ref_env_from(secret_name: str, prefix: Optional[str] = None) -> Dict[str, Any]:
    """Container envFrom entry that exposes every key of a Secret."""
    entry: Dict[str, Any] = {}
    if prefix:
        entry['prefix'] = prefix
    entry['secretRef'] = {'name': secret_name}
    return entry


def require_target_name(label: str, injection: ProviderInjection) -> str:
    if not injection.target_name:
        raise MissingTargetNameException(
            f"{label} Missing target name (.for_name) for env injection of secret '{injection.secret_name}'",
            provider=label.strip('[]'),
            secret_name=injection.secret_name
        )
    return injection.target_name


def require_key(label: str, injection: ProviderInjection) -> str:
    if not injection.strategy.key:
        raise MissingKeyParameterException(
            f"{label} Missing 'key' parameter for env injection of secret '{injection.secret_name}'",
            provider=label.strip('[]'),
            secret_name=injection.secret_name
        )
    return injection.strategy.key


def check_key_allowed(label: str, key: str, allowed_keys: Optional[List[str]], secret_name: str) -> None:
    """Enforce an allow-list; None or an empty list allows every key."""
    if allowed_keys and key not in allowed_keys:
        raise KeyNotAllowedException(
            f"{label} Key '{key}' is not allowed. Allowed keys: {', '.join(allowed_keys)}",
            provider=label.strip('[]'),
            secret_name=secret_name,
            key=key,
            allowed_keys=list(allowed_keys)
        )


def single_env_from(label: str, secret_name: str, injections: List[ProviderInjection]) -> List[Dict[str, Any]]:
    """One envFrom entry per Secret; conflicting prefixes are a configuration error."""
    prefixes = {i.strategy.prefix for i in injections}
    if len(prefixes) > 1:
        shown = ', '.join(sorted(p or '<none>' for p in prefixes))
        raise ProviderConfigException(
            f"{label} Multiple envFrom prefixes for Secret '{secret_name}': {shown}",
            provider=label.strip('[]')
        )
    return [secret_ref_env_from(secret_name, prefixes.pop())]


def keyed_env_entry(label: str, secret_name: str, allowed_keys: Optional[List[str]],
                    injection: ProviderInjection) -> Dict[str, Any]:
    """Env entry for one key, checked in order: target name, key, allow-list."""
    target_name = require_target_name(label, injection)
    key = require_key(label, injection)
    check_key_allowed(label, key, allowed_keys, injection.secret_name)
    return secret_key_ref_env(target_name, secret_name, key)


def env_or_env_from_payload(provider, injections: List[ProviderInjection],
                            env_entry: Callable[[ProviderInjection], Dict[str, Any]]) -> Any:
    """Build the payload for a batch of env or envFrom injections.

    Args:
        provider: The provider owning the Secret
        injections: Injections sharing one strategy kind
        env_entry: Builds the env entry for a single injection

    Raises:
        ProviderConfigException: If the batch mixes strategy kinds
        UnsupportedStrategyException: For any kind other than env and envFrom
    """
    if not injections:
        return []
    label = provider._label()
    kind = injections[0].strategy.kind
    if any(i.strategy.kind != kind for i in injections):
        raise ProviderConfigException(
            f"{label} Cannot mix injection strategies in one payload",
            provider=provider.__class__.__name__
        )
    if kind == 'env':
        return [env_entry(injection) for injection in injections]
    if kind == 'envFrom':
        return single_env_from(label, provider.name, injections)
    raise UnsupportedStrategyException(
        f"{label} Unsupported injection strategy: {kind}",
        provider=provider.__class__.__name__,
        secret_name=injections[0].secret_name,
        supported=provider.supported_strategies
    )
