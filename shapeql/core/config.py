# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Configuration loading with Pydantic validation and env var substitution."""

import os
import re
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, model_validator


class BackendConfig(BaseModel):
    """AWS client configuration threaded into every client the server builds.

    Example YAML:
        backend:
          region: eu-west-1
          profile_name: readonly
          endpoint_url: http://localhost:4566  # LocalStack
    """
    region: str = "us-east-1"
    profile_name: Optional[str] = None
    endpoint_url: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    aws_session_token: Optional[str] = None


class DescriptionsConfig(BaseModel):
    """Where service API descriptions are loaded from."""
    source: Literal["botocore", "directory"] = "botocore"
    path: Optional[str] = None  # Required for the directory source
    pattern: str = "**/*.json"

    @model_validator(mode="after")
    def check_path(self) -> "DescriptionsConfig":
        if self.source == "directory" and not self.path:
            raise ValueError("descriptions.path is required when source is 'directory'")
        return self


class CompilerConfig(BaseModel):
    """Compiler behaviour switches."""
    # Raise instead of logging when two generated types share a name but differ
    strict_conflicts: bool = False


def _get_env(key: str) -> Optional[str]:
    value = os.environ.get(key)
    return value if value else None


class ServerConfig(BaseModel):
    """Configuration for the GraphQL server.

    Environment variables SHAPEQL_HOST and SHAPEQL_PORT take precedence over
    YAML values.
    """
    host: str = Field(default="127.0.0.1", description="Host address to bind the server to")
    port: int = Field(default=4000, description="Port to listen on")
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])
    graphiql: bool = Field(default=True, description="Serve GraphiQL for GET /graphql without a query")
    relay_enabled: bool = Field(default=False, description="Mount the GitHub webhook relay at /webhooks")

    @model_validator(mode="after")
    def apply_env_overrides(self) -> "ServerConfig":
        """Apply environment variable overrides after model creation."""
        host = _get_env("SHAPEQL_HOST")
        if host is not None:
            self.host = host
        port = _get_env("SHAPEQL_PORT")
        if port is not None:
            self.port = int(port)
        return self


class Config(BaseModel):
    """Root configuration model."""
    model_config = {"extra": "ignore"}

    # Endpoint namespaces (metadata.endpointPrefix) to expose
    services: list[str] = Field(default_factory=list)
    descriptions: DescriptionsConfig = Field(default_factory=DescriptionsConfig)
    backend: BackendConfig = Field(default_factory=BackendConfig)
    compiler: CompilerConfig = Field(default_factory=CompilerConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    config_dir: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "Config":
        """Load config from YAML file with env var substitution."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(path) as f:
            raw_content = f.read()

        # Substitute environment variables: ${VAR_NAME}
        substituted = _substitute_env_vars(raw_content)

        data = yaml.safe_load(substituted) or {}
        config = cls.model_validate(data)
        config.config_dir = str(path.parent.resolve())
        return config

    def descriptions_path(self) -> Optional[Path]:
        """Directory of description documents, resolved relative to the config file."""
        if not self.descriptions.path:
            return None
        path = Path(self.descriptions.path)
        if not path.is_absolute() and self.config_dir:
            path = Path(self.config_dir) / path
        return path


def _substitute_env_vars(content: str) -> str:
    """Replace ${VAR_NAME} with environment variable values."""
    pattern = re.compile(r'\$\{([^}]+)\}')

    def replacer(match: re.Match) -> str:
        var_name = match.group(1)
        value = os.environ.get(var_name)
        if value is None:
            raise ValueError(f"Environment variable not set: {var_name}")
        return value

    return pattern.sub(replacer, content)
