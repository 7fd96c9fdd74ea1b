"""Dependency injection container."""

from dishka import AsyncContainer, make_async_container
from dishka.integrations.fastapi import FastapiProvider, setup_dishka
from fastapi import FastAPI

from huddle.util.di import PROVIDERS, get_provider


def create_container(web: bool = True) -> AsyncContainer:
    """Build the production container.

    Args:
        web: Add the FastAPI integration provider. Scheduled jobs such as the
            retention sweep run outside a request and pass ``False``.

    Returns:
        Container with production providers
    """
    providers = [get_provider(base, use_mock=False)() for base in PROVIDERS]
    if web:
        providers.append(FastapiProvider())
    return make_async_container(*providers)


def setup_di(app: FastAPI, container: AsyncContainer) -> None:
    """Attach ``container`` to ``app`` so routes can use ``FromDishka``."""
    setup_dishka(container, app)
