"""Provider base class and mock/production selection."""

from typing import ClassVar, Literal, Type

from dishka import Provider

# Infrastructure components that tests may swap for in-memory versions
Component = Literal["persistence", "cache"]


class ProviderBase(Provider):
    """Base for all DI providers.

    A provider with subclasses is a swappable component: exactly one
    subclass sets ``__is_mock__ = False`` (PostgreSQL, Redis) and the test
    suite registers one with ``__is_mock__ = True`` (in-memory). A provider
    without subclasses is concrete and always used directly.

    Attributes:
        __mock_component__: Component name, None for concrete providers
        __is_mock__: Whether this is the in-memory implementation
    """

    __mock_component__: ClassVar[Component | None] = None
    __is_mock__: ClassVar[bool] = False


def get_provider(base: Type[ProviderBase], use_mock: bool = False) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for ``base``.

    Mock subclasses live in the test package, so they only exist once it
    has been imported.

    Args:
        base: Provider class listed in ``PROVIDERS``
        use_mock: Select the in-memory implementation of a component

    Returns:
        Provider class (not instantiated)

    Raises:
        ValueError: If the component has no implementation of that kind
    """
    implementations = base.__subclasses__()
    if not implementations:
        return base

    for impl in implementations:
        if impl.__is_mock__ == use_mock:
            return impl

    kind = "mock" if use_mock else "production"
    raise ValueError(f"No {kind} implementation for {base.__mock_component__ or base.__name__}")
