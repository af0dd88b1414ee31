"""Startup and shutdown of the registry application."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from oauth2_registry.config import get_settings
from oauth2_registry.core.logging import logger
from oauth2_registry.infrastructure import InfrastructureFactory


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Open the registry store before serving.

    Building each repository once creates the local directories or, with
    ``auto_create_resources``, the DynamoDB tables, so a misconfigured store
    fails at startup instead of on the first login page.
    """
    settings = get_settings()
    logger.info(
        f"Starting OAuth2 client registry v{app.version} "
        f"(store={settings.infrastructure_provider})"
    )

    factory = InfrastructureFactory.from_settings(settings)
    repositories = (
        factory.get_registration_repository(),
        factory.get_domain_repository(),
        factory.get_mobile_app_repository(),
    )
    logger.info(
        "Registry store ready: "
        + ", ".join(type(repository).__name__ for repository in repositories)
    )

    yield

    logger.info("Shutting down OAuth2 client registry")
