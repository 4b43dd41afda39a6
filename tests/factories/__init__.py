"""Test factories for creating test data."""

from tests.factories.directory import ContactFactory, ProfileFactory
from tests.factories.transport import (
    FakeClientFactory,
    FakeTransportClient,
    instant_sleep,
)

__all__ = [
    "ContactFactory",
    "FakeClientFactory",
    "FakeTransportClient",
    "ProfileFactory",
    "instant_sleep",
]
