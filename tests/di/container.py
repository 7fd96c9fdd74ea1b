"""Test container builder with selective unmocking."""

from typing import get_args

from dishka import AsyncContainer, make_async_container

from huddle.util.di import PROVIDERS, Component, get_provider

MOCKABLE_COMPONENTS: frozenset[str] = frozenset(get_args(Component))


def build_test_container(unmock: set[Component] | None = None) -> AsyncContainer:
    """Build a container that mocks every infrastructure component by default.

    Mocked persistence is the in-memory repositories; mocked cache is an
    ``InMemoryCacheStore``. Unmocking ``persistence`` needs PostgreSQL at
    ``DATABASE__URL``; unmocking ``cache`` needs Redis at ``CACHE__REDIS_URL``
    and ``CACHE__BACKEND=redis``.

    Args:
        unmock: Components that use their production provider

    Returns:
        Configured test container

    Raises:
        ValueError: If ``unmock`` names an unknown component

    Examples:
        container = build_test_container()
        container = build_test_container(unmock={"persistence"})
    """
    unmock = unmock or set()
    unknown = set(unmock) - MOCKABLE_COMPONENTS
    if unknown:
        raise ValueError(f"Unknown components: {sorted(unknown)}")

    # Concrete providers have no subclasses; get_provider returns them as-is
    providers = [
        get_provider(base, use_mock=base.__mock_component__ not in unmock)()
        for base in PROVIDERS
    ]
    return make_async_container(*providers)
