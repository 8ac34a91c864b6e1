"""Tests for the kubectl wrapper."""

import os
import subprocess
from unittest.mock import patch

import pytest
import yaml

from secret_stack.config.exceptions import KubectlException
from secret_stack.secrets.kubectl import KubectlClient

MANIFEST = {
    'apiVersion': 'v1',
    'kind': 'Secret',
    'metadata': {'name': 'api-token-secret', 'namespace': 'default'},
    'type': 'vendor.com/custom',
    'data': {'api_key': 'bXktYXBwLWtleQ=='},
}


def _completed(returncode=0, stdout='', stderr=''):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


def test_apply_writes_manifest_and_runs_kubectl():
    seen = {}

    def fake_run(cmd, capture_output, text):
        path = cmd[-1]
        with open(path) as f:
            seen['manifest'] = yaml.safe_load(f)
        seen['cmd'] = cmd
        seen['path'] = path
        return _completed(stdout='secret/api-token-secret configured\n')

    with patch('secret_stack.secrets.kubectl.subprocess.run', side_effect=fake_run):
        output = KubectlClient(context='staging').apply(MANIFEST)

    assert output == 'secret/api-token-secret configured\n'
    assert seen['cmd'][:5] == ['kubectl', '--context', 'staging', 'apply', '-f']
    assert seen['manifest'] == MANIFEST
    assert not os.path.exists(seen['path'])


def test_apply_failure_raises():
    with patch('secret_stack.secrets.kubectl.subprocess.run',
               return_value=_completed(returncode=1, stderr='forbidden\n')):
        with pytest.raises(KubectlException) as exc_info:
            KubectlClient().apply(MANIFEST)

    assert exc_info.value.returncode == 1
    assert 'Secret/api-token-secret' in str(exc_info.value)
    assert 'forbidden' in str(exc_info.value)


def test_missing_binary_raises():
    with patch('secret_stack.secrets.kubectl.subprocess.run', side_effect=FileNotFoundError()):
        with pytest.raises(KubectlException) as exc_info:
            KubectlClient(binary='kubectl-missing').apply(MANIFEST)

    assert 'kubectl-missing' in str(exc_info.value)
    assert '--dry-run' in exc_info.value.guidance
