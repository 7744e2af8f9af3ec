from .current_user import CurrentUserUseCase, GetUserUseCase
from .forgot_password import ForgotPasswordUseCase
from .login_user import LoginUserUseCase
from .logout_user import LogoutUserUseCase
from .register_user import RegisterUserUseCase
from .reset_password import ResetPasswordUseCase
from .results import OkResult, UserResult

__all__ = [
    "CurrentUserUseCase",
    "ForgotPasswordUseCase",
    "GetUserUseCase",
    "LoginUserUseCase",
    "LogoutUserUseCase",
    "OkResult",
    "RegisterUserUseCase",
    "ResetPasswordUseCase",
    "UserResult",
]
