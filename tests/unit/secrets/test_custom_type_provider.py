import unittest

import pytest

from secret_stack.config.exceptions import (
    InvalidSecretValueException,
    KeyNotAllowedException,
    MissingKeyParameterException,
    MissingTargetNameException,
    ProviderConfigException,
)
from secret_stack.secrets.models import InjectionStrategy
from secret_stack.secrets.providers import CustomTypeSecretProvider
from .base import VENDOR_API_VALUE, b64, make_injection


class TestCustomTypeSecretProvider(unittest.TestCase):
    """Secret rendering and env injection for custom Secret types."""

    def setUp(self):
        self.provider = CustomTypeSecretProvider(
            name='api-token-secret',
            namespace='default',
            secret_type='vendor.com/custom',
            allowed_keys=['api_key', 'dataset']
        )

    def test_prepare_renders_custom_type(self):
        effects = self.provider.prepare('VENDOR_API', VENDOR_API_VALUE)

        self.assertEqual(len(effects), 1)
        manifest = effects[0].value
        self.assertEqual(manifest['apiVersion'], 'v1')
        self.assertEqual(manifest['kind'], 'Secret')
        self.assertEqual(manifest['metadata'], {'name': 'api-token-secret', 'namespace': 'default'})
        self.assertEqual(manifest['type'], 'vendor.com/custom')
        self.assertEqual(manifest['data'], {
            'api_key': b64('my-app-key'),
            'dataset': b64('production'),
        })
        self.assertEqual(effects[0].type, 'kubectl')
        self.assertEqual(effects[0].secret_name, 'VENDOR_API')

    def test_namespace_defaults_to_default(self):
        provider = CustomTypeSecretProvider(name='s', secret_type='vendor.com/custom')
        manifest = provider.prepare('X', {'a': '1'})[0].value
        self.assertEqual(manifest['metadata']['namespace'], 'default')

    def test_scalar_values_are_stringified(self):
        provider = CustomTypeSecretProvider(name='s', secret_type='vendor.com/custom')
        manifest = provider.prepare('X', {'port': 5432, 'enabled': True})[0].value
        self.assertEqual(manifest['data'], {'port': b64('5432'), 'enabled': b64('true')})

    def test_prepare_rejects_key_outside_allow_list(self):
        with self.assertRaises(KeyNotAllowedException) as ctx:
            self.provider.prepare('VENDOR_API', {'api_key': 'k', 'region': 'eu'})

        self.assertEqual(ctx.exception.key, 'region')
        self.assertIn("Key 'region' is not allowed", str(ctx.exception))
        self.assertIn('Allowed keys: api_key, dataset', str(ctx.exception))

    def test_prepare_rejects_string_value(self):
        with self.assertRaises(InvalidSecretValueException):
            self.provider.prepare('VENDOR_API', 'just-a-string')

    def test_prepare_rejects_nested_value(self):
        with self.assertRaises(InvalidSecretValueException):
            self.provider.prepare('VENDOR_API', {'api_key': {'nested': 'x'}})

    def test_env_injection_payload(self):
        injections = [
            make_injection(self.provider, target_name='VENDOR_API_KEY', key='api_key'),
            make_injection(self.provider, target_name='VENDOR_DATASET', key='dataset'),
        ]

        payload = self.provider.get_injection_payload(injections)

        self.assertEqual(payload, [
            {
                'name': 'VENDOR_API_KEY',
                'valueFrom': {'secretKeyRef': {'name': 'api-token-secret', 'key': 'api_key'}},
            },
            {
                'name': 'VENDOR_DATASET',
                'valueFrom': {'secretKeyRef': {'name': 'api-token-secret', 'key': 'dataset'}},
            },
        ])

    def test_env_injection_requires_target_name(self):
        injection = make_injection(self.provider, target_name=None, key='api_key')

        with self.assertRaises(MissingTargetNameException) as ctx:
            self.provider.get_injection_payload([injection])

        self.assertIn('Missing target name (.for_name)', str(ctx.exception))
        self.assertEqual(ctx.exception.secret_name, 'VENDOR_API')

    def test_env_injection_requires_key(self):
        injection = make_injection(self.provider, target_name='VENDOR_API_KEY', key=None)

        with self.assertRaises(MissingKeyParameterException) as ctx:
            self.provider.get_injection_payload([injection])

        self.assertIn("Missing 'key' parameter", str(ctx.exception))

    def test_env_injection_rejects_key_outside_allow_list(self):
        injection = make_injection(self.provider, target_name='VENDOR_REGION', key='region')

        with self.assertRaises(KeyNotAllowedException) as ctx:
            self.provider.get_injection_payload([injection])

        self.assertEqual(ctx.exception.allowed_keys, ['api_key', 'dataset'])

    def test_env_from_injection(self):
        injection = make_injection(self.provider, kind='envFrom', prefix='VENDOR_')

        payload = self.provider.get_injection_payload([injection])

        self.assertEqual(payload, [{'prefix': 'VENDOR_', 'secretRef': {'name': 'api-token-secret'}}])

    def test_target_paths(self):
        self.assertEqual(
            self.provider.get_target_path(InjectionStrategy(kind='env', container_index=1)),
            'spec.template.spec.containers[1].env'
        )
        self.assertEqual(
            self.provider.get_target_path(InjectionStrategy(kind='envFrom')),
            'spec.template.spec.containers[0].envFrom'
        )


@pytest.mark.parametrize('secret_type', [None, '', '   '])
def test_secret_type_is_required(secret_type):
    with pytest.raises(ProviderConfigException) as exc_info:
        CustomTypeSecretProvider(name='api-token-secret', secret_type=secret_type)
    assert 'secret_type is required' in str(exc_info.value)


def test_name_is_required():
    with pytest.raises(ProviderConfigException):
        CustomTypeSecretProvider(name='', secret_type='vendor.com/custom')


@pytest.mark.parametrize('allowed_keys', [None, []])
def test_missing_or_empty_allow_list_accepts_any_key(allowed_keys):
    provider = CustomTypeSecretProvider(name='s', secret_type='vendor.com/custom', allowed_keys=allowed_keys)

    manifest = provider.prepare('X', {'anything': 'goes'})[0].value
    payload = provider.get_injection_payload([make_injection(provider, target_name='ANY', key='anything')])

    assert list(manifest['data']) == ['anything']
    assert payload[0]['valueFrom']['secretKeyRef']['key'] == 'anything'
