"""
Secret value utilities shared by connectors and providers.
"""

import json
import logging
import re
from typing import Any, Iterable, List, Mapping

from ..config.exceptions import InvalidSecretNameException, InvalidSecretValueException
from .models import SecretValue

logger = logging.getLogger(__name__)

SECRET_NAME_PATTERN = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def validate_secret_name(name: str) -> str:
    """Ensure a secret name can be used as an environment variable suffix.

    Raises:
        InvalidSecretNameException: If the name has characters other than letters, digits and '_'
    """
    if not isinstance(name, str) or not SECRET_NAME_PATTERN.match(name):
        raise InvalidSecretNameException(
            f"Invalid secret name '{name}': must match {SECRET_NAME_PATTERN.pattern}",
            secret_name=str(name)
        )
    return name


def parse_secret_value(raw: str) -> SecretValue:
    """Parse a raw string into a structured value when it holds a JSON object.

    JSON scalars and arrays are kept as the raw string so that values such as
    "123" or "true" survive untouched.
    """
    stripped = raw.strip() if isinstance(raw, str) else raw
    if isinstance(stripped, str) and stripped.startswith('{'):
        try:
            parsed = json.loads(stripped)
        except json.JSONDecodeError:
            logger.debug("Value looks like JSON but does not parse, keeping raw string")
            return raw
        if isinstance(parsed, dict):
            return parsed
    return raw


def require_mapping(value: SecretValue, provider: str, secret_name: str) -> Mapping[str, Any]:
    """Ensure a value is a key/value mapping of scalars."""
    if not isinstance(value, dict):
        raise InvalidSecretValueException(
            f"[{provider}] Invalid value for secret '{secret_name}': expected an object of key/value pairs, "
            f"got {type(value).__name__}",
            provider=provider,
            secret_name=secret_name
        )
    for key, item in value.items():
        if isinstance(item, (dict, list)) or item is None:
            raise InvalidSecretValueException(
                f"[{provider}] Invalid value for key '{key}' of secret '{secret_name}': "
                f"expected a string, number or boolean",
                provider=provider,
                secret_name=secret_name
            )
    return value


def require_string(value: SecretValue, provider: str, secret_name: str) -> str:
    """Ensure a value is a plain string."""
    if not isinstance(value, str):
        raise InvalidSecretValueException(
            f"[{provider}] Invalid value for secret '{secret_name}': expected a string, "
            f"got {type(value).__name__}",
            provider=provider,
            secret_name=secret_name
        )
    return value


def require_fields(value: Mapping[str, Any], fields: Iterable[str], provider: str, secret_name: str) -> None:
    """Ensure a mapping has non-empty values for all required fields."""
    missing: List[str] = [f for f in fields if value.get(f) in (None, '')]
    if missing:
        raise InvalidSecretValueException(
            f"[{provider}] Secret '{secret_name}' is missing required field(s): {', '.join(missing)}",
            provider=provider,
            secret_name=secret_name
        )
