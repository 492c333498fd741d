"""
Offline SQS Invoke - SQS SendMessage compatible server

Accepts SendMessage calls for queues declared in serverless.yml and invokes
the function bound to each queue on the local Lambda runtime.
"""

import argparse
import logging
from typing import Optional

from fastapi import FastAPI

from .api.routes import router
from .config import SqsInvokeConfig, config
from .core.logging_config import setup_logging
from .exceptions import register_exception_handlers
from .lifecycle import manage_lifespan
from .middleware import request_id_middleware
from .models.context import BridgeContext

# Logger setup
setup_logging()
logger = logging.getLogger("sqs_invoke.main")


def create_app(
    sqs_config: SqsInvokeConfig = config, context: Optional[BridgeContext] = None
) -> FastAPI:
    """
    Assemble the application.

    When `context` is given it is used as-is; otherwise the lifespan loads
    the service definition and builds it on startup.
    """
    app = FastAPI(
        title="Offline SQS Invoke",
        version="1.0.0",
        lifespan=lambda app: manage_lifespan(app, sqs_config),
    )
    if context is not None:
        app.state.bridge_context = context

    app.middleware("http")(request_id_middleware)
    register_exception_handlers(app)
    app.include_router(router)
    return app


app = create_app()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Invoke local Lambda functions from SQS SendMessage calls",
    )
    parser.add_argument(
        "--config",
        dest="config_path",
        help=f"Serverless service file (default: {config.SERVERLESS_CONFIG_PATH})",
    )
    parser.add_argument("--stage", help=f"Stage (default: {config.SERVERLESS_STAGE})")
    parser.add_argument("--port", type=int, help="Listen port (default: from UVICORN_BIND_ADDR)")
    return parser


def main(argv: list[str] | None = None) -> int:
    import uvicorn

    args = build_parser().parse_args(argv)

    overrides = {}
    if args.config_path:
        overrides["SERVERLESS_CONFIG_PATH"] = args.config_path
    if args.stage:
        overrides["SERVERLESS_STAGE"] = args.stage
    sqs_config = config.model_copy(update=overrides)

    host, port = sqs_config.bind_address
    if args.port:
        port = args.port
        sqs_config = sqs_config.model_copy(update={"UVICORN_BIND_ADDR": f"{host}:{port}"})

    logger.info(
        f"Using service definition {sqs_config.SERVERLESS_CONFIG_PATH} "
        f"(stage {sqs_config.SERVERLESS_STAGE})"
    )

    uvicorn.run(create_app(sqs_config), host=host, port=port, log_config=None)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
