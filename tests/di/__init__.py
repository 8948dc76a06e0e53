"""Mock providers for testing."""

from .mail import MockMailProvider
from .oauth import MockOAuthClientsProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockMailProvider",
    "MockOAuthClientsProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
