"""Tests for SecretManager registration, resolution and preparation."""

import unittest
from unittest.mock import patch

from secret_stack.config.exceptions import (
    DuplicateSecretException,
    InvalidSecretNameException,
    MissingSecretValueException,
    UnknownConnectorException,
    UnknownProviderException,
    UnknownSecretException,
)
from secret_stack.secrets import (
    CustomTypeSecretProvider,
    EnvConnector,
    InMemoryConnector,
    OpaqueSecretProvider,
    SecretEntry,
    SecretManager,
)
from .base import VENDOR_API_VALUE, b64


def custom_provider():
    return CustomTypeSecretProvider(
        name='api-token-secret',
        secret_type='vendor.com/custom',
        allowed_keys=['api_key', 'dataset']
    )


class TestSecretManagerRegistration(unittest.TestCase):

    def test_add_secret_forms(self):
        manager = (
            SecretManager()
            .add_secret('A')
            .add_secret(SecretEntry(name='B', provider='p'))
            .add_secret({'name': 'C', 'connector': 'c'})
        )

        secrets = manager.get_secrets()
        self.assertEqual(list(secrets), ['A', 'B', 'C'])
        self.assertEqual(secrets['B'].provider, 'p')
        self.assertEqual(secrets['C'].connector, 'c')
        self.assertTrue(manager.has_secret('A'))
        self.assertFalse(manager.has_secret('D'))

    def test_duplicate_secret(self):
        manager = SecretManager().add_secret('A')
        with self.assertRaises(DuplicateSecretException):
            manager.add_secret('A')

    def test_duplicate_connector_and_provider(self):
        manager = SecretManager().add_connector('mem', InMemoryConnector()).add_provider('p', custom_provider())
        with self.assertRaises(DuplicateSecretException):
            manager.add_connector('mem', InMemoryConnector())
        with self.assertRaises(DuplicateSecretException):
            manager.add_provider('p', custom_provider())

    def test_invalid_secret_name(self):
        with self.assertRaises(InvalidSecretNameException):
            SecretManager().add_secret('vendor-api')

    def test_default_must_be_registered(self):
        with self.assertRaises(UnknownConnectorException):
            SecretManager().set_default_connector('missing')
        with self.assertRaises(UnknownProviderException):
            SecretManager().set_default_provider('missing')


class TestSecretManagerResolution(unittest.TestCase):

    def setUp(self):
        self.manager = (
            SecretManager()
            .add_connector('mem', InMemoryConnector())
            .add_connector('other', InMemoryConnector())
            .add_provider('api_token', custom_provider())
            .add_provider('opaque', OpaqueSecretProvider(name='app'))
        )

    def test_ambiguous_without_default(self):
        with self.assertRaises(UnknownConnectorException) as ctx:
            self.manager.resolve_connector_name()
        self.assertEqual(ctx.exception.available, ['mem', 'other'])
        with self.assertRaises(UnknownProviderException):
            self.manager.resolve_provider_name()

    def test_defaults_are_used(self):
        self.manager.set_default_connector('other').set_default_provider('opaque')

        self.assertEqual(self.manager.resolve_connector_name(), 'other')
        self.assertEqual(self.manager.resolve_provider_name(), 'opaque')

    def test_explicit_name_wins(self):
        self.manager.set_default_provider('opaque')
        self.manager.add_secret('VENDOR_API', connector='mem', provider='api_token')

        self.assertEqual(self.manager.provider_name_for_secret('VENDOR_API'), 'api_token')
        self.assertIsInstance(self.manager.provider_for_secret('VENDOR_API'), CustomTypeSecretProvider)
        self.assertEqual(self.manager.connector_name_for_secret('VENDOR_API'), 'mem')

    def test_unknown_explicit_name(self):
        with self.assertRaises(UnknownProviderException):
            self.manager.resolve_provider('nope')

    def test_unknown_secret(self):
        with self.assertRaises(UnknownSecretException) as ctx:
            self.manager.provider_for_secret('VENDOR_API')
        self.assertIn("add_secret('VENDOR_API')", ctx.exception.guidance)

    def test_validate_reports_unresolvable_secret(self):
        self.manager.add_secret('VENDOR_API')
        with self.assertRaises(UnknownConnectorException):
            self.manager.validate()

    def test_validate_requires_connectors(self):
        with self.assertRaises(UnknownConnectorException):
            SecretManager().add_provider('p', custom_provider()).validate()


class TestSecretManagerPrepare(unittest.TestCase):

    def test_single_connector_and_provider_are_implicit_defaults(self):
        manager = (
            SecretManager()
            .add_connector('mem', InMemoryConnector({'VENDOR_API': VENDOR_API_VALUE}))
            .add_provider('api_token', custom_provider())
            .add_secret('VENDOR_API')
        )

        effects = manager.prepare()

        self.assertEqual(len(effects), 1)
        self.assertEqual(effects[0].provider_name, 'api_token')
        self.assertEqual(effects[0].value['metadata']['name'], 'api-token-secret')
        self.assertEqual(effects[0].value['data']['api_key'], b64('my-app-key'))

    def test_load_secrets_calls_each_connector_once(self):
        first = InMemoryConnector({'A': 'a', 'B': 'b'})
        second = InMemoryConnector({'C': 'c'})
        manager = (
            SecretManager()
            .add_connector('first', first)
            .add_connector('second', second)
            .set_default_connector('first')
            .add_provider('opaque', OpaqueSecretProvider(name='app'))
            .add_secret('A')
            .add_secret('C', connector='second')
            .add_secret('B')
        )

        with patch.object(first, 'load', wraps=first.load) as first_load, \
                patch.object(second, 'load', wraps=second.load) as second_load:
            values = manager.load_secrets()

        self.assertEqual(values, {'A': 'a', 'C': 'c', 'B': 'b'})
        first_load.assert_called_once_with(['A', 'B'])
        second_load.assert_called_once_with(['C'])

    def test_missing_value_propagates(self):
        manager = (
            SecretManager()
            .add_connector('mem', InMemoryConnector())
            .add_provider('opaque', OpaqueSecretProvider(name='app'))
            .add_secret('A')
        )
        with self.assertRaises(MissingSecretValueException):
            manager.prepare()

    def test_set_working_dir_reaches_connectors(self):
        connector = InMemoryConnector()
        SecretManager().add_connector('mem', connector).set_working_dir('/tmp/project')
        self.assertEqual(str(connector.working_dir), '/tmp/project')

    def test_set_working_dir_keeps_explicit_dirs(self):
        explicit = EnvConnector(working_dir='/srv/secrets')
        relative = EnvConnector(working_dir='env')
        unset = InMemoryConnector()
        manager = (
            SecretManager()
            .add_connector('explicit', explicit)
            .add_connector('relative', relative)
            .add_connector('unset', unset)
        )

        manager.set_working_dir('/tmp/project', override=False)

        self.assertEqual(str(explicit.working_dir), '/srv/secrets')
        self.assertEqual(str(relative.working_dir), '/tmp/project/env')
        self.assertEqual(str(unset.working_dir), '/tmp/project')
