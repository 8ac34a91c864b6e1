"""
Exception classes with built-in guidance for secrets and manifest generation.
"""
import sys
from typing import List, Optional


class ConfigException(Exception):
    """Base exception for all secret-stack errors."""
    def __init__(self, message: str, error_type: str = None, provider: str = None,
                 secret_name: str = None, key: str = None):
        super().__init__(message)
        self.error_type = error_type
        self.provider = provider
        self.secret_name = secret_name
        self.key = key
        self.guidance = self._generate_guidance()

    def _get_current_command(self):
        """Get the current command being executed."""
        if len(sys.argv) > 0:
            executable = sys.argv[0].split('/')[-1]
            args = sys.argv[1:]
            if args:
                return f"{executable} {' '.join(args)}"
            else:
                return executable
        return "unknown command"

    def _generate_guidance(self):
        """Override in subclasses to provide specific guidance."""
        return f"""
❌ Configuration error: {self}
💡 Check your configuration and try again
"""


class ProjectConfigException(ConfigException):
    """Raised when the project config file is missing, malformed or points at missing code."""
    def __init__(self, message: str, searched_paths: List[str] = None, **kwargs):
        self.searched_paths = searched_paths or []
        super().__init__(message, error_type="project_config", **kwargs)

    def _generate_guidance(self):
        searched = '\n'.join(f"   - {p}" for p in self.searched_paths)
        if searched:
            return f"""
❌ {self}
💡 Create a secret-stack.yaml in one of these locations, or pass --config:
{searched}
"""
        return f"""
❌ {self}
💡 Check the import paths and structure of your secret-stack.yaml
"""


# Provider errors

class ProviderConfigException(ConfigException):
    """Raised when a provider is constructed with invalid options."""
    def __init__(self, message: str, provider: str = None, **kwargs):
        super().__init__(message, error_type="provider_config", provider=provider, **kwargs)

    def _generate_guidance(self):
        return f"""
❌ {self}
💡 Check the options passed to {self.provider or 'the provider'} in your secret manager setup
"""


class MissingTargetNameException(ConfigException):
    """Raised when an env injection has no target variable name."""
    def __init__(self, message: str, provider: str = None, secret_name: str = None):
        super().__init__(message, error_type="missing_target_name", provider=provider, secret_name=secret_name)

    def _generate_guidance(self):
        return f"""
❌ {self}
💡 Name the environment variable before injecting:
   c.secrets('{self.secret_name}').for_name('MY_ENV_VAR').inject('env', key='...')
"""


class KeyNotAllowedException(ConfigException):
    """Raised when a key is not part of the provider's allow-list."""
    def __init__(self, message: str, provider: str = None, secret_name: str = None,
                 key: str = None, allowed_keys: List[str] = None):
        self.allowed_keys = allowed_keys or []
        super().__init__(message, error_type="key_not_allowed", provider=provider,
                         secret_name=secret_name, key=key)

    def _generate_guidance(self):
        return f"""
❌ {self}
💡 Use one of the allowed keys ({', '.join(self.allowed_keys)}) or extend allowed_keys on the provider
"""


class MissingKeyParameterException(ConfigException):
    """Raised when an env injection does not say which key of the Secret to use."""
    def __init__(self, message: str, provider: str = None, secret_name: str = None):
        super().__init__(message, error_type="missing_key", provider=provider, secret_name=secret_name)

    def _generate_guidance(self):
        return f"""
❌ {self}
💡 Pass the Secret key to read: .inject('env', key='<key>')
"""


class UnsupportedStrategyException(ConfigException):
    """Raised when an injection strategy is not supported by a provider."""
    def __init__(self, message: str, provider: str = None, secret_name: str = None,
                 supported: List[str] = None):
        self.supported = supported or []
        super().__init__(message, error_type="unsupported_strategy", provider=provider, secret_name=secret_name)


# Secret value errors

class InvalidSecretValueException(ConfigException):
    """Raised when a loaded value has the wrong shape for its provider."""
    def __init__(self, message: str, provider: str = None, secret_name: str = None):
        super().__init__(message, error_type="invalid_value", provider=provider, secret_name=secret_name)


class InvalidSecretNameException(ConfigException):
    """Raised when a secret name cannot be used as an environment variable suffix."""
    def __init__(self, message: str, secret_name: str = None):
        super().__init__(message, error_type="invalid_name", secret_name=secret_name)


class MissingSecretValueException(ConfigException):
    """Raised when a connector cannot find the raw value of a secret."""
    def __init__(self, message: str, secret_name: str = None, source: str = None):
        self.source = source
        super().__init__(message, error_type="missing_value", secret_name=secret_name)

    def _generate_guidance(self):
        if self.source:
            return f"""
❌ Secret '{self.secret_name}' has no value
💡 Provide it in one of the following ways:
   1. export {self.source}='<value>'
   2. Or add {self.source}=<value> to your .env file
"""
        return f"""
❌ Secret '{self.secret_name}' has no value: {self}
"""


class SecretNotLoadedException(ConfigException):
    """Raised when a connector is asked for a value it has not loaded."""
    def __init__(self, message: str, secret_name: str = None):
        super().__init__(message, error_type="not_loaded", secret_name=secret_name)


# Registry errors

class DuplicateSecretException(ConfigException):
    """Raised when a secret, connector or provider name is registered twice."""
    def __init__(self, message: str, secret_name: str = None):
        super().__init__(message, error_type="duplicate", secret_name=secret_name)


class UnknownConnectorException(ConfigException):
    """Raised when a connector cannot be resolved."""
    def __init__(self, message: str, available: List[str] = None, **kwargs):
        self.available = available or []
        super().__init__(message, error_type="unknown_connector", **kwargs)


class UnknownProviderException(ConfigException):
    """Raised when a provider cannot be resolved."""
    def __init__(self, message: str, available: List[str] = None, **kwargs):
        self.available = available or []
        super().__init__(message, error_type="unknown_provider", **kwargs)


class UnknownSecretException(ConfigException):
    """Raised when a secret is used without being registered in its manager."""
    def __init__(self, message: str, secret_name: str = None):
        super().__init__(message, error_type="unknown_secret", secret_name=secret_name)

    def _generate_guidance(self):
        return f"""
❌ {self}
💡 Register it first: manager.add_secret('{self.secret_name}')
"""


class ResourceNotFoundException(ConfigException):
    """Raised when an injection target resource does not exist in a stack."""
    def __init__(self, message: str, resource_id: str = None, **kwargs):
        self.resource_id = resource_id
        super().__init__(message, error_type="resource_not_found", **kwargs)


class SecretConflictException(ConfigException):
    """Raised when two prepared Secret manifests collide."""
    def __init__(self, message: str, identifier: str = None, level: str = None,
                 origins: Optional[List[str]] = None):
        self.identifier = identifier
        self.level = level
        self.origins = origins or []
        super().__init__(message, error_type="secret_conflict")

    def _generate_guidance(self):
        return f"""
❌ Secret conflict on '{self.identifier}' ({self.level}): {self}
💡 Resolve this in one of the following ways:
   1. Give the providers distinct Secret names
   2. Or relax secret.conflict.strategies.{self.level} in secret-stack.yaml (overwrite / autoMerge)
"""


# External system errors

class ProjectIdRequiredException(ConfigException):
    """Raised when PROJECT_ID is required for Google Secret Manager but not available."""
    def __init__(self, message: str, secret_name: str = None):
        super().__init__(message, error_type="project_id", secret_name=secret_name)

    def _generate_guidance(self):
        return f"""
❌ Project ID required for Google Secret Manager
💡 Resolve this in one of the following ways:
   1. Set PROJECT_ID environment variable: export PROJECT_ID=your-project
   2. Or pass project_id in the connector options of secret-stack.yaml
"""


class KubectlException(ConfigException):
    """Raised when kubectl is unavailable or fails."""
    def __init__(self, message: str, returncode: int = None, stderr: str = None):
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(message, error_type="kubectl")

    def _generate_guidance(self):
        command = self._get_current_command()
        return f"""
❌ {self}
💡 Check that kubectl is installed and pointed at the right cluster, or preview with:
   {command} --dry-run
"""
