"""
Thin kubectl wrapper used to apply rendered Secret manifests.
"""

import logging
import os
import subprocess
import tempfile
from typing import Any, Dict, List, Optional

from ..config.exceptions import KubectlException
from ..manifests.render import to_yaml

logger = logging.getLogger(__name__)


class KubectlClient:
    """Applies manifests via `kubectl apply -f <file>`."""

    def __init__(self, binary: str = 'kubectl', context: Optional[str] = None):
        self.binary = binary
        self.context = context

    def _base_command(self) -> List[str]:
        cmd = [self.binary]
        if self.context:
            cmd.extend(['--context', self.context])
        return cmd

    def apply(self, manifest: Dict[str, Any]) -> str:
        """Apply a single manifest.

        Returns:
            kubectl stdout

        Raises:
            KubectlException: If kubectl is missing or exits non-zero
        """
        metadata = manifest.get('metadata', {})
        label = f"{manifest.get('kind')}/{metadata.get('name')}"

        fd, path = tempfile.mkstemp(prefix='secret-stack-', suffix='.yml')
        try:
            with os.fdopen(fd, 'w') as f:
                f.write(to_yaml(manifest))

            cmd = self._base_command() + ['apply', '-f', path]
            logger.debug(f"Running: {' '.join(cmd)}")
            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except FileNotFoundError as e:
                raise KubectlException(f"kubectl binary not found: {self.binary}") from e

            if result.returncode != 0:
                raise KubectlException(
                    f"kubectl apply failed for {label}: {result.stderr.strip()}",
                    returncode=result.returncode,
                    stderr=result.stderr
                )
            logger.info(f"Applied {label}")
            return result.stdout
        finally:
            if os.path.exists(path):
                os.unlink(path)
