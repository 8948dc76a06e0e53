"""Unit tests for mailers."""

import pytest

from portal.adapter.mail import LoggingMailer, MockMailer
from portal.adapter.mail.smtp import render_otp_body
from portal.domain.service import MailDeliveryError
from portal.domain.value import Email


class TestRenderOtpBody:
    def test_contains_code_and_expiry(self):
        body = render_otp_body("482913", 5)

        assert "482913" in body
        assert "5 minutes" in body


class TestMockMailer:
    """Tests for MockMailer."""

    @pytest.mark.asyncio
    async def test_records_last_code_per_email(self):
        mailer = MockMailer()

        await mailer.send(Email("a@example.com"), "111111")
        await mailer.send(Email("b@example.com"), "222222")
        await mailer.send(Email("a@example.com"), "333333")

        assert mailer.last_code_for("a@example.com") == "333333"
        assert mailer.last_code_for("c@example.com") is None

    @pytest.mark.asyncio
    async def test_configured_failure(self):
        mailer = MockMailer()
        mailer.fail_with = "boom"

        with pytest.raises(MailDeliveryError):
            await mailer.send(Email("a@example.com"), "111111")

        assert mailer.sent == []


class TestLoggingMailer:
    @pytest.fixture
    def events(self, monkeypatch):
        recorded = []
        monkeypatch.setattr(
            "portal.adapter.mail.console.logfire.warn",
            lambda message, **attributes: recorded.append(attributes),
        )
        return recorded

    @pytest.mark.asyncio
    async def test_logs_code_by_default(self, events):
        await LoggingMailer().send(Email("a@example.com"), "111111")

        assert events == [{"email": "a@example.com", "code": "111111"}]

    @pytest.mark.asyncio
    async def test_code_can_be_left_out(self, events):
        await LoggingMailer(include_code=False).send(Email("a@example.com"), "111111")

        assert events == [{"email": "a@example.com"}]
