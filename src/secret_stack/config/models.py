"""
Pydantic models for the project configuration file (secret-stack.yaml).
"""
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ConflictStrategy = Literal['error', 'overwrite', 'autoMerge']
OutputMode = Literal['stack', 'resource', 'flat', 'stdout']


class ConflictStrategies(BaseModel):
    """Strategy per conflict level."""
    intra_provider: ConflictStrategy = 'autoMerge'
    cross_provider: ConflictStrategy = 'error'
    cross_manager: ConflictStrategy = 'error'


class ConflictConfig(BaseModel):
    """How colliding Secret manifests are resolved."""
    strict: bool = False
    strategies: ConflictStrategies = Field(default_factory=ConflictStrategies)

    def strategy_for(self, level: str) -> str:
        if self.strict:
            return 'error'
        return getattr(self.strategies, level)


class SecretConfig(BaseModel):
    """The `secret` section: where secret managers come from."""
    manager: Optional[str] = None  # import path "module:attr"
    managers: Dict[str, Any] = {}  # name -> import path or inline declaration
    conflict: ConflictConfig = Field(default_factory=ConflictConfig)


class GenerateConfig(BaseModel):
    """The `generate` section: where rendered manifests go."""
    output_dir: str = 'output'
    output_mode: OutputMode = 'stack'
    clean_output_dir: bool = False


class ProjectConfig(BaseModel):
    """Top-level secret-stack.yaml."""
    model_config = ConfigDict(extra='forbid')

    stacks: Optional[str] = None  # import path "module:attr"
    secret: SecretConfig = Field(default_factory=SecretConfig)
    generate: GenerateConfig = Field(default_factory=GenerateConfig)
    config_path: Optional[str] = None

    @property
    def base_dir(self):
        if self.config_path:
            return Path(self.config_path).resolve().parent
        return Path.cwd()
