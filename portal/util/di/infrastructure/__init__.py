"""Infrastructure providers."""

# Import bases
from .mail import MailProvider
from .oauth import OAuthClientsProvider
from .persistence import PersistenceProvider

# Import implementations (needed for __subclasses__())
from .mail import ProdMailProvider  # noqa: F401
from .oauth import ProdOAuthClientsProvider  # noqa: F401
from .persistence import ProdPersistenceProvider  # noqa: F401

__all__ = [
    "MailProvider",
    "OAuthClientsProvider",
    "PersistenceProvider",
    "ProdMailProvider",
    "ProdOAuthClientsProvider",
    "ProdPersistenceProvider",
]
