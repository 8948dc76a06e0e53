"""Mail delivery adapters."""

from .console import LoggingMailer, MockMailer, SentMessage
from .smtp import SmtpMailer

__all__ = ["LoggingMailer", "MockMailer", "SentMessage", "SmtpMailer"]
