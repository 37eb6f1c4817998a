"""
Base data models shared by all FinManager records.
"""

from typing import Any, Generic, List, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator


class FinManagerModel(BaseModel):
    """
    Base model for records received from the API.

    Records are display data: unknown fields are ignored and numeric ids are
    accepted as strings.
    """

    model_config = ConfigDict(
        extra="ignore",
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )


class SubsidiaryRef(FinManagerModel):
    """Subsidiary as embedded in other records."""
    id: str
    name: str = ""


class EmployeeRef(FinManagerModel):
    """Employee as embedded in payouts and expenses."""
    id: str
    first_name: str = ""
    last_name: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


T = TypeVar("T")


class Page(BaseModel, Generic[T]):
    """One page of a list endpoint."""

    data: List[T] = Field(default_factory=list)
    total: int = 0

    @model_validator(mode="before")
    @classmethod
    def accept_bare_list(cls, value: Any) -> Any:
        # Some endpoints return a plain array instead of {data, total}
        if isinstance(value, list):
            return {"data": value, "total": len(value)}
        if isinstance(value, dict) and value.get("total") is None:
            value = dict(value)
            value["total"] = len(value.get("data") or [])
        return value

