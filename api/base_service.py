"""
Base class for resource services.

Each service wraps one REST resource: reads go through the session's
QueryCache, mutations call the API and then invalidate the cached list and
the cached record they touched.
"""

import logging
from typing import Any, Dict, Generic, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as ModelValidationError

from api.client import ApiClient
from api.query_cache import QueryCache, make_key
from models.base import Page
from utils.error_handling import ApiError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10

UNEXPECTED_RESPONSE_MESSAGE = "Unexpected response from server"


def parse_response(model: Any, payload: Any, method: str, path: str) -> Any:
    """
    Validate a response body against a model.

    Raises:
        ApiError: the body does not match the model
    """
    try:
        return model.model_validate(payload)
    except ModelValidationError as e:
        logger.error(f"Unreadable response from {method} {path}: {e}")
        raise ApiError(UNEXPECTED_RESPONSE_MESSAGE, method=method, path=path, response_body=payload) from e


class ResourceService(Generic[M]):
    """
    Read access to one resource.

    Subclasses set:
        path: collection path, e.g. "/invoices"
        list_key: cache prefix of list queries, e.g. "invoices"
        item_key: cache prefix of single records, e.g. "invoice"
        model: pydantic model of one record
    """

    path: str = ""
    list_key: str = ""
    item_key: str = ""
    model: Type[M]

    def __init__(self, client: ApiClient, cache: QueryCache):
        self.client = client
        self.cache = cache

    def list(self, filters: Optional[Mapping[str, Any]] = None) -> Page[M]:
        """
        Fetch one page of the collection.

        Args:
            filters: Query filters; empty values are dropped, page and
                pageSize default to 1 and 10

        Returns:
            Page of records
        """
        params: Dict[str, Any] = {"page": DEFAULT_PAGE, "pageSize": DEFAULT_PAGE_SIZE}
        params.update({k: v for k, v in (filters or {}).items() if v is not None and v != ""})

        def fetch() -> Page[M]:
            payload = self.client.get(self.path, params=params)
            return parse_response(Page[self.model], payload if payload is not None else [], "GET", self.path)

        return self.cache.fetch(make_key(self.list_key, params=params), fetch)

    def get(self, record_id: str) -> M:
        """Fetch one record by id."""
        def fetch() -> M:
            item_path = self._item_path(record_id)
            return parse_response(self.model, self.client.get(item_path), "GET", item_path)

        return self.cache.fetch(make_key(self.item_key, record_id), fetch)

    def _item_path(self, record_id: str, action: Optional[str] = None) -> str:
        item_path = f"{self.path}/{record_id}"
        return f"{item_path}/{action}" if action else item_path

    def _invalidate(self, record_id: Optional[str] = None) -> None:
        self.cache.invalidate(self.list_key)
        if record_id is not None:
            self.cache.invalidate(self.item_key, str(record_id))

    def _parse(self, payload: Any, method: str, path: str) -> Optional[M]:
        if isinstance(payload, dict):
            return parse_response(self.model, payload, method, path)
        return None

    # Mutation helpers

    def _create(self, payload: Dict[str, Any]) -> Optional[M]:
        result = self.client.post(self.path, json=payload)
        self._invalidate()
        logger.info(f"Created {self.item_key}")
        return self._parse(result, "POST", self.path)

    def _update(self, record_id: str, payload: Dict[str, Any]) -> Optional[M]:
        result = self.client.patch(self._item_path(record_id), json=payload)
        self._invalidate(record_id)
        logger.info(f"Updated {self.item_key} {record_id}")
        return self._parse(result, "PATCH", self._item_path(record_id))

    def _delete(self, record_id: str) -> None:
        self.client.delete(self._item_path(record_id))
        self._invalidate(record_id)
        logger.info(f"Deleted {self.item_key} {record_id}")

    def _action(self, record_id: str, action: str, payload: Optional[Dict[str, Any]] = None) -> Optional[M]:
        result = self.client.post(self._item_path(record_id, action), json=payload)
        self._invalidate(record_id)
        logger.info(f"{action} {self.item_key} {record_id}")
        return self._parse(result, "POST", self._item_path(record_id, action))


class CrudService(ResourceService[M]):
    """Resource with create, update and delete."""

    def create(self, payload: Dict[str, Any]) -> Optional[M]:
        return self._create(payload)

    def update(self, record_id: str, payload: Dict[str, Any]) -> Optional[M]:
        return self._update(record_id, payload)

    def delete(self, record_id: str) -> None:
        self._delete(record_id)
