"""
Table filter bars.

A filter bar is a list of FilterField definitions rendered above a table;
ListFilters turns the submitted query string into list parameters for the
resource services.
"""

from dataclasses import dataclass, field
from datetime import date, datetime, time, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils.formatting import to_iso_datetime

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

SEARCH = "search"
SELECT = "select"
DATE_RANGE = "dateRange"


@dataclass
class FilterField:
    """One control of a filter bar."""
    name: str
    type: str
    placeholder: str = ""
    options: List[Tuple[str, str]] = field(default_factory=list)  # (value, label)


def status_filter(*statuses: str) -> FilterField:
    return FilterField(
        name="status",
        type=SELECT,
        placeholder="All Statuses",
        options=[(s, s.capitalize()) for s in statuses],
    )


def subsidiary_filter(subsidiaries: List[Any]) -> FilterField:
    return FilterField(
        name="subsidiary",
        type=SELECT,
        placeholder="All Subsidiaries",
        options=[(s.id, s.name) for s in subsidiaries],
    )


def date_range_filter() -> FilterField:
    return FilterField(name="dateRange", type=DATE_RANGE, placeholder="Select date range")


class ListFilters(BaseModel):
    """Query parameters of a list page."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True, extra="ignore")

    search: Optional[str] = None
    subsidiary: Optional[str] = None
    status: Optional[str] = None
    category: Optional[str] = None
    is_active: Optional[bool] = Field(default=None, alias="isActive")
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    page: int = DEFAULT_PAGE
    page_size: int = Field(default=DEFAULT_PAGE_SIZE, alias="pageSize")

    @field_validator("*", mode="before")
    @classmethod
    def blank_is_none(cls, v: Any) -> Any:
        if isinstance(v, str) and v.strip() == "":
            return None
        return v

    @field_validator("page", mode="before")
    @classmethod
    def valid_page(cls, v: Any) -> int:
        try:
            return max(DEFAULT_PAGE, int(v))
        except (TypeError, ValueError):
            return DEFAULT_PAGE

    @field_validator("page_size", mode="before")
    @classmethod
    def valid_page_size(cls, v: Any) -> int:
        try:
            return min(MAX_PAGE_SIZE, max(1, int(v)))
        except (TypeError, ValueError):
            return DEFAULT_PAGE_SIZE

    @classmethod
    def from_query(cls, query: Mapping[str, Any]) -> 'ListFilters':
        """
        Read filters from a query string, ignoring values that do not parse.
        """
        values = dict(query)
        for key in ("date_from", "date_to"):
            if values.get(key):
                try:
                    date.fromisoformat(str(values[key]))
                except ValueError:
                    values.pop(key)
        if values.get("isActive") not in (None, "", "true", "false"):
            values.pop("isActive")
        return cls.model_validate(values)

    @property
    def date_range(self) -> Optional[List[str]]:
        """The date range as the two ISO instants the API expects."""
        if not self.date_from or not self.date_to:
            return None
        start = datetime.combine(self.date_from, time.min, tzinfo=timezone.utc)
        end = datetime.combine(self.date_to, time(23, 59, 59, 999000), tzinfo=timezone.utc)
        return [to_iso_datetime(start), to_iso_datetime(end)]

    def to_params(self) -> Dict[str, Any]:
        """Parameters for ResourceService.list; empty filters are left out."""
        params: Dict[str, Any] = {
            "search": self.search,
            "subsidiary": self.subsidiary,
            "status": self.status,
            "category": self.category,
            "isActive": self.is_active,
            "dateRange": self.date_range,
            "page": self.page,
            "pageSize": self.page_size,
        }
        return {k: v for k, v in params.items() if v is not None}

    def query_string_values(self, **overrides: Any) -> Dict[str, Any]:
        """Current filters as query string values, for pagination links."""
        values: Dict[str, Any] = {
            "search": self.search,
            "subsidiary": self.subsidiary,
            "status": self.status,
            "category": self.category,
            "isActive": None if self.is_active is None else str(self.is_active).lower(),
            "date_from": self.date_from.isoformat() if self.date_from else None,
            "date_to": self.date_to.isoformat() if self.date_to else None,
            "page": self.page,
            "pageSize": self.page_size,
        }
        values.update(overrides)
        return {k: v for k, v in values.items() if v is not None}

    def is_filtered(self) -> bool:
        return any(
            v is not None
            for v in (self.search, self.subsidiary, self.status, self.category,
                      self.is_active, self.date_from, self.date_to)
        )


def page_count(total: int, page_size: int) -> int:
    if total <= 0:
        return 1
    return (total + page_size - 1) // page_size
