"""
Offline SQS invoke configuration definition.

Loads configuration from environment variables and provides a Pydantic model.
Uses pydantic-settings for type safety and defaults.
"""

import sys
from typing import Optional, Tuple

from pydantic import Field
from services.common.core.config import BaseAppConfig


class SqsInvokeConfig(BaseAppConfig):
    """
    Configuration management for the offline SQS invoke bridge.
    """

    # Server settings
    UVICORN_BIND_ADDR: str = Field(default="0.0.0.0:3003", description="Listen address")

    # Service definition
    SERVERLESS_CONFIG_PATH: str = Field(
        default="serverless.yml", description="Serverless service definition file path"
    )
    SERVERLESS_STAGE: str = Field(default="dev", description="Stage used for variable resolution")

    # Local Lambda runtime (e.g. serverless-offline). Placeholder credentials only.
    LAMBDA_ENDPOINT: str = Field(
        default="http://localhost:3002", description="Lambda Invoke API endpoint"
    )
    LAMBDA_REGION: str = Field(default="localhost", description="Region used for request signing")
    LAMBDA_ACCESS_KEY_ID: str = Field(default="key", description="Placeholder access key")
    LAMBDA_SECRET_ACCESS_KEY: str = Field(default="secret", description="Placeholder secret key")
    LAMBDA_INVOKE_TIMEOUT: Optional[float] = Field(
        default=None, description="Lambda invoke timeout (seconds), None waits indefinitely"
    )

    # Logging
    LOG_CONFIG_PATH: str = Field(
        default="config/logging.yml", description="Logging dictConfig YAML path"
    )

    @property
    def bind_address(self) -> Tuple[str, int]:
        """Split UVICORN_BIND_ADDR into (host, port)."""
        host, _, port = self.UVICORN_BIND_ADDR.rpartition(":")
        return host or "0.0.0.0", int(port)


# Load config as a singleton.
# pydantic-settings reads environment variables during instantiation.
try:
    config = SqsInvokeConfig()
except Exception as e:
    sys.stderr.write(f"Failed to load configuration: {e}\n")
    raise
