"""Mock mail providers for testing."""

from dishka import Scope, provide

from portal.adapter.mail import MockMailer
from portal.domain.service import Mailer
from portal.util.di.infrastructure.mail import MailProvider


class MockMailProvider(MailProvider):
    """Mock mail provider recording codes instead of sending them."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_mailer(self) -> Mailer:
        """Provide recording mailer."""
        return MockMailer()
