#!/usr/bin/env python3
"""
Example usage of a custom type Secret with selective env injection.

Run with:
    export SECRET_STACK_SECRET_VENDOR_API='{"api_key": "my-app-key", "dataset": "production"}'
    python example_usage.py
"""

from secret_stack import (
    CustomTypeSecretProvider,
    EnvConnector,
    SecretManager,
    SecretsOrchestrator,
    Stack,
    simple_app_template,
)
from secret_stack.config.logging import bootstrap_logging
from secret_stack.manifests import to_multi_document_yaml


def build_secret_manager() -> SecretManager:
    return (
        SecretManager()
        .add_connector('env', EnvConnector())
        .add_provider('api_token', CustomTypeSecretProvider(
            name='api-token-secret',
            namespace='default',
            secret_type='vendor.com/custom',
            allowed_keys=['api_key', 'dataset'],
        ))
        .add_secret('VENDOR_API')
    )


def build_stack(manager: SecretManager) -> Stack:
    stack = Stack.from_template(simple_app_template, {
        'name': 'my-app',
        'image': 'nginx',
        'namespace': 'default',
    })

    def configure(c):
        c.secrets('VENDOR_API').for_name('VENDOR_API_KEY').inject('env', key='api_key')
        c.secrets('VENDOR_API').for_name('VENDOR_DATASET').inject('env', key='dataset')

    return stack.use_secrets(manager, configure)


def main():
    bootstrap_logging()
    manager = build_secret_manager()
    stack = build_stack(manager)

    print("# Secrets")
    print(to_multi_document_yaml(SecretsOrchestrator({'default': manager}).apply(dry_run=True)))
    print("# Stack")
    print(to_multi_document_yaml(stack.build().values()))


if __name__ == '__main__':
    main()
