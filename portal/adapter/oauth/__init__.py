"""OAuth provider adapters."""

from .base import BaseOAuth2Client
from .github import GithubOAuthClient
from .gitlab import GitlabOAuthClient
from .google import GoogleOAuthClient
from .mock import MockOAuthClient

__all__ = [
    "BaseOAuth2Client",
    "GithubOAuthClient",
    "GitlabOAuthClient",
    "GoogleOAuthClient",
    "MockOAuthClient",
]
