"""
Root pytest configuration for secret-stack.

Bootstraps logging and isolates tests from secrets in the developer's
environment and from process-level caches.
"""

import os

import pytest

from secret_stack.config.logging import bootstrap_logging
from secret_stack.config.loading import clear_secret_manager_cache
from secret_stack.secrets.connectors.env_connector import DEFAULT_PREFIX

bootstrap_logging()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch):
    """Remove prefixed secret variables and reset caches around every test."""
    for name in list(os.environ):
        if name.startswith(DEFAULT_PREFIX):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv('SECRET_STACK_CONFIG', raising=False)
    clear_secret_manager_cache()
    yield
    clear_secret_manager_cache()
