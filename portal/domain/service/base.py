"""Base service class for domain services."""


class Service:
    """Base class for authentication domain services.

    Services hold the rules that span several entities (OTP challenges,
    accounts and their provider links, sessions) and talk to repositories
    through the ports in ``portal.domain.repository``.
    """
