from unittest.mock import MagicMock

import httpx
import pytest
import respx

from services.sqs_invoke.config import SqsInvokeConfig
from services.sqs_invoke.core.exceptions import LambdaExecutionError
from services.sqs_invoke.services.lambda_invoker import LambdaInvoker

INVOKE_URL = "http://lambda.test:3002/2015-03-31/functions/shop-dev-processOrder/invocations"


@pytest.fixture
def sqs_config():
    return SqsInvokeConfig(LAMBDA_ENDPOINT="http://lambda.test:3002/")


@pytest.mark.asyncio
@respx.mock
async def test_invoke_posts_signed_request_response_call(sqs_config):
    route = respx.post(INVOKE_URL).mock(return_value=httpx.Response(200, content=b"null"))

    async with httpx.AsyncClient() as client:
        invoker = LambdaInvoker(client=client, config=sqs_config)
        result = await invoker.invoke_function("shop-dev-processOrder", b'{"Records": []}')

    assert result.success is True
    assert result.status_code == 200
    assert result.payload == b"null"

    request = route.calls.last.request
    assert request.content == b'{"Records": []}'
    assert request.headers["X-Amz-Invocation-Type"] == "RequestResponse"
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Authorization"].startswith(
        "AWS4-HMAC-SHA256 Credential=key/"
    )
    assert "/localhost/lambda/aws4_request" in request.headers["Authorization"]
    assert "X-Amz-Date" in request.headers


@pytest.mark.asyncio
@respx.mock
async def test_non_200_status_is_failure(sqs_config):
    respx.post(INVOKE_URL).mock(
        return_value=httpx.Response(404, json={"message": "Function not found"})
    )

    async with httpx.AsyncClient() as client:
        invoker = LambdaInvoker(client=client, config=sqs_config)
        result = await invoker.invoke_function("shop-dev-processOrder", b"{}")

    assert result.success is False
    assert result.status_code == 404
    assert "Function not found" in result.error


@pytest.mark.asyncio
@respx.mock
async def test_function_error_header_is_exposed(sqs_config):
    respx.post(INVOKE_URL).mock(
        return_value=httpx.Response(
            200,
            headers={"X-Amz-Function-Error": "Unhandled"},
            json={"errorMessage": "boom"},
        )
    )

    async with httpx.AsyncClient() as client:
        invoker = LambdaInvoker(client=client, config=sqs_config)
        result = await invoker.invoke_function("shop-dev-processOrder", b"{}")

    assert result.success is True
    assert result.is_logic_error is True
    assert result.function_error == "Unhandled"


@pytest.mark.asyncio
@respx.mock
async def test_connection_error_raises_lambda_execution_error(sqs_config):
    respx.post(INVOKE_URL).mock(side_effect=httpx.ConnectError("connection refused"))

    async with httpx.AsyncClient() as client:
        invoker = LambdaInvoker(client=client, config=sqs_config)
        with pytest.raises(LambdaExecutionError) as exc:
            await invoker.invoke_function("shop-dev-processOrder", b"{}")

    assert exc.value.function_name == "shop-dev-processOrder"
    assert isinstance(exc.value.cause, httpx.ConnectError)


def test_invoke_url_quotes_function_name(sqs_config):
    invoker = LambdaInvoker(client=MagicMock(spec=httpx.AsyncClient), config=sqs_config)

    assert invoker.invoke_url("a b") == (
        "http://lambda.test:3002/2015-03-31/functions/a%20b/invocations"
    )
