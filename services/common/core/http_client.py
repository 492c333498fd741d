import logging

import httpx

from .config import BaseAppConfig

logger = logging.getLogger(__name__)


class HttpClientFactory:
    """
    HTTP Client Factory for centralized SSL verification handling.
    """

    def __init__(self, config: BaseAppConfig):
        self.config = config

    def create_async_client(self, **kwargs) -> httpx.AsyncClient:
        """
        Create an httpx.AsyncClient with configured SSL verification.

        Args:
            **kwargs: Additional arguments for httpx.AsyncClient
        """
        verify = kwargs.pop("verify", None)

        # If verify is not explicitly provided, use config default
        if verify is None:
            verify = self.config.VERIFY_SSL

        if "limits" not in kwargs:
            kwargs["limits"] = httpx.Limits(max_keepalive_connections=10, max_connections=50)
        # Local invocations must not be routed through HTTP(S)_PROXY from the host environment.
        kwargs.setdefault("trust_env", False)

        logger.debug("Creating async HTTP client (verify=%s)", verify)
        return httpx.AsyncClient(verify=verify, **kwargs)
