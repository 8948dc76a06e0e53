"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class OAuthProviderError(AdapterError):
    """An OAuth provider rejected a request or returned an unusable response."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider}: {message}")
