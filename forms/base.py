"""
Form validation base.

Forms are pydantic models fed with the raw submitted values. Validation turns
pydantic's errors into per-field messages keyed by input name, so a form that
fails never reaches the API client.
"""

import logging
from decimal import Decimal
from typing import Any, ClassVar, Dict, Mapping, Type, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic import ValidationError as PydanticValidationError

from utils.error_handling import ValidationError
from utils.formatting import CURRENCY_SYMBOL

logger = logging.getLogger(__name__)

F = TypeVar("F", bound="ConsoleForm")

DEFAULT_REQUIRED_MESSAGE = "Required"

_MESSAGE_PREFIXES = ("Value error, ", "Assertion failed, ")


def parse_amount(value: Any) -> Any:
    """Accept amounts typed with thousands separators or a currency sign."""
    if isinstance(value, str):
        value = value.replace(",", "").replace(CURRENCY_SYMBOL, "").strip()
        return value or None
    return value


class ConsoleForm(BaseModel):
    """
    Base class for console forms.

    Subclasses may set:
        form_name: used in logs and error details
        required_messages: input name -> message when the input is empty
        invalid_messages: input name -> message for any other failure
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        extra="ignore",
        populate_by_name=True,
    )

    form_name: ClassVar[str] = "form"
    required_messages: ClassVar[Dict[str, str]] = {}
    invalid_messages: ClassVar[Dict[str, str]] = {}

    @model_validator(mode="before")
    @classmethod
    def blank_inputs_are_missing(cls, data: Any) -> Any:
        # Browsers submit untouched inputs as empty strings
        if isinstance(data, Mapping):
            return {k: v for k, v in data.items() if not (isinstance(v, str) and v.strip() == "")}
        return data

    @classmethod
    def validate_form(cls: Type[F], data: Mapping[str, Any]) -> F:
        """
        Validate submitted values.

        Args:
            data: Raw input values keyed by input name

        Returns:
            The validated form

        Raises:
            ValidationError: with field_errors for every failing input
        """
        try:
            return cls.model_validate(dict(data))
        except PydanticValidationError as e:
            field_errors = cls._field_errors(e)
            logger.info(f"{cls.form_name} form rejected: {', '.join(sorted(field_errors))}")
            raise ValidationError(
                "Please correct the highlighted fields",
                field_errors=field_errors,
                form_name=cls.form_name,
            ) from e

    @classmethod
    def _field_errors(cls, error: PydanticValidationError) -> Dict[str, str]:
        field_errors: Dict[str, str] = {}
        for item in error.errors():
            loc = item.get("loc") or ()
            name = ".".join(str(part) for part in loc) or "__all__"
            if name in field_errors:
                continue
            field_errors[name] = cls._message_for(name, item)
        return field_errors

    @classmethod
    def _message_for(cls, name: str, item: Dict[str, Any]) -> str:
        if item.get("type") == "missing":
            return cls.required_messages.get(name, DEFAULT_REQUIRED_MESSAGE)
        if name in cls.invalid_messages:
            return cls.invalid_messages[name]
        message = str(item.get("msg", "Invalid value"))
        for prefix in _MESSAGE_PREFIXES:
            if message.startswith(prefix):
                return message[len(prefix):]
        return message

    def to_payload(self) -> Dict[str, Any]:
        """The request body for the API, keyed by wire names."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def cents_to_input(cents: Any) -> str:
    """Render cents as the plain major-unit value shown in an amount input."""
    if cents in (None, ""):
        return ""
    amount = Decimal(int(cents)) / 100
    return f"{amount:.2f}"
