"""
Lambda Invoker Service

Sends synchronous Invoke requests to the local Lambda runtime
(boto3.client('lambda').invoke() compatible endpoint, e.g. serverless-offline).
"""

import logging
from typing import Optional
from urllib.parse import quote

import httpx
from botocore.auth import SigV4Auth
from botocore.awsrequest import AWSRequest
from botocore.credentials import Credentials

from services.sqs_invoke.config import SqsInvokeConfig
from services.sqs_invoke.core.exceptions import LambdaExecutionError
from services.sqs_invoke.models.result import InvocationResult

logger = logging.getLogger("sqs_invoke.lambda_invoker")

INVOKE_PATH = "/2015-03-31/functions/{function_name}/invocations"


class LambdaInvoker:
    def __init__(self, client: httpx.AsyncClient, config: SqsInvokeConfig):
        """
        Args:
            client: Shared httpx.AsyncClient
            config: SqsInvokeConfig instance
        """
        self.client = client
        self.config = config
        self.endpoint = config.LAMBDA_ENDPOINT.rstrip("/")
        self.credentials = Credentials(
            config.LAMBDA_ACCESS_KEY_ID, config.LAMBDA_SECRET_ACCESS_KEY
        )

    def invoke_url(self, function_name: str) -> str:
        path = INVOKE_PATH.format(function_name=quote(function_name, safe=""))
        return f"{self.endpoint}{path}"

    def _signed_headers(self, url: str, payload: bytes) -> dict:
        """Sign the request with the placeholder credentials (SigV4, service 'lambda')."""
        request = AWSRequest(
            method="POST",
            url=url,
            data=payload,
            headers={
                "Content-Type": "application/json",
                "X-Amz-Invocation-Type": "RequestResponse",
            },
        )
        SigV4Auth(self.credentials, "lambda", self.config.LAMBDA_REGION).add_auth(request)
        return dict(request.headers.items())

    async def invoke_function(
        self, function_name: str, payload: bytes, timeout: Optional[float] = None
    ) -> InvocationResult:
        """
        Invoke a Lambda function synchronously (RequestResponse).

        Args:
            function_name: Function name to invoke
            payload: JSON request body
            timeout: Request timeout, falls back to LAMBDA_INVOKE_TIMEOUT (None waits forever)

        Returns:
            InvocationResult with the runtime's status code, headers and payload

        Raises:
            LambdaExecutionError: the runtime could not be reached
        """
        url = self.invoke_url(function_name)
        if timeout is None:
            timeout = self.config.LAMBDA_INVOKE_TIMEOUT

        logger.debug(f"Invoking {function_name} at {url}")

        try:
            response = await self.client.post(
                url,
                content=payload,
                headers=self._signed_headers(url, payload),
                timeout=timeout,
            )
        except httpx.RequestError as e:
            logger.error(
                f"Lambda invocation failed for function '{function_name}'",
                extra={
                    "function_name": function_name,
                    "target_url": url,
                    "error_type": type(e).__name__,
                    "error_detail": str(e),
                },
            )
            raise LambdaExecutionError(function_name, e) from e

        success = response.status_code == 200
        return InvocationResult(
            success=success,
            status_code=response.status_code,
            payload=response.content,
            headers=dict(response.headers),
            error=None if success else response.text,
        )
