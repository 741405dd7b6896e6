"""FastAPI application factory"""

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from src.api.error import ClientError, client_error_handler
from src.api.routes import invoices


def create_app(config) -> FastAPI:
    """
    Build the invoicing API

    Args:
        config: ApplicationConfig (or any object exposing the same attributes)

    Returns:
        Configured FastAPI application
    """
    logging.basicConfig(
        level=getattr(logging, str(config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Matter Invoicing Service",
        description="Invoice lifecycle, multi-currency payments, splits and partner shares",
        version="1.0.0",
    )

    if config.CORS_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.CORS_ORIGINS,
            allow_credentials=config.CORS_ALLOW_CREDENTIALS,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(ClientError, client_error_handler)

    app.include_router(invoices.router)

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app
