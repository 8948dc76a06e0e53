"""Authentication use cases."""

from .common import AuthSessionResponse
from .complete_oauth import CompleteOAuthRequest, CompleteOAuthUseCase
from .confirm_otp import ConfirmOtpRequest, ConfirmOtpUseCase
from .get_current_user import (
    GetCurrentUserRequest,
    GetCurrentUserResponse,
    GetCurrentUserUseCase,
)
from .request_otp import RequestOtpRequest, RequestOtpUseCase

__all__ = [
    "AuthSessionResponse",
    "CompleteOAuthRequest",
    "CompleteOAuthUseCase",
    "ConfirmOtpRequest",
    "ConfirmOtpUseCase",
    "GetCurrentUserRequest",
    "GetCurrentUserResponse",
    "GetCurrentUserUseCase",
    "RequestOtpRequest",
    "RequestOtpUseCase",
]
