"""Dependency injection module.

Scopes: settings, the perf recorder, the microcache and the cache store
live for the whole process (APP); repositories, services and use cases are
built per request (REQUEST) around one database session.
"""

from typing import Type

from huddle.util.di.application import ProdApplicationProvider
from huddle.util.di.base import Component, ProviderBase, get_provider
from huddle.util.di.core import ProdConfigProvider
from huddle.util.di.domain import ProdDomainProvider
from huddle.util.di.infrastructure import (
    CacheProvider,
    PersistenceProvider,
    ProdCacheProvider,
    ProdPersistenceProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    PersistenceProvider,
    CacheProvider,
]

__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "CacheProvider",
    "PersistenceProvider",
    "ProdCacheProvider",
    "ProdPersistenceProvider",
]
