"""
Forms for signing in and for the settings pages.
"""

from typing import ClassVar, Dict, Optional

from pydantic import EmailStr, Field, ValidationInfo, field_validator

from forms.base import ConsoleForm

MIN_PASSWORD_LENGTH = 8


class LoginForm(ConsoleForm):
    form_name: ClassVar[str] = "login"
    required_messages: ClassVar[Dict[str, str]] = {
        "username": "Please input your username!",
        "password": "Please input your password!",
    }

    username: str
    password: str = Field(repr=False)


class ProfileForm(ConsoleForm):
    form_name: ClassVar[str] = "profile"
    required_messages: ClassVar[Dict[str, str]] = {"email": "Please enter email"}
    invalid_messages: ClassVar[Dict[str, str]] = {"email": "Please enter a valid email"}

    email: EmailStr
    phone: Optional[str] = None
    username: Optional[str] = None


class PasswordChangeForm(ConsoleForm):
    form_name: ClassVar[str] = "password"
    required_messages: ClassVar[Dict[str, str]] = {
        "current_password": "Please enter current password",
        "new_password": "Please enter new password",
        "confirm_password": "Please confirm new password",
    }
    invalid_messages: ClassVar[Dict[str, str]] = {
        "new_password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
    }

    current_password: str = Field(repr=False)
    new_password: str = Field(min_length=MIN_PASSWORD_LENGTH, repr=False)
    confirm_password: str = Field(repr=False)

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        new_password = info.data.get("new_password")
        if new_password is not None and v != new_password:
            raise ValueError("Passwords do not match")
        return v


class NotificationTemplateForm(ConsoleForm):
    form_name: ClassVar[str] = "notification template"
    required_messages: ClassVar[Dict[str, str]] = {
        "subject": "Please enter subject",
        "body": "Please enter body",
    }

    subject: str
    body: str
