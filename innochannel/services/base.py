"""Shared helpers for resource services."""

from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Type, TypeVar

import pydantic
import structlog
from dateutil.parser import parse as parse_datetime

from innochannel.exceptions import ApiError, ValidationError

if TYPE_CHECKING:
    from innochannel.client import InnochannelClient

ModelT = TypeVar("ModelT", bound=pydantic.BaseModel)

FieldErrors = Dict[str, List[str]]


class BaseService:
    """Base class for services built on top of the API client."""

    def __init__(self, client: "InnochannelClient"):
        self.client = client
        self.logger = structlog.get_logger(self.__class__.__module__)

    @staticmethod
    def _unwrap(response: Optional[Any]) -> Any:
        """Strip the ``{"data": ...}`` envelope the API wraps resources in."""
        if isinstance(response, dict) and "data" in response:
            return response["data"]
        return response

    def _hydrate(self, model: Type[ModelT], response: Optional[Any]) -> ModelT:
        data = self._unwrap(response)
        if not isinstance(data, dict):
            raise ApiError(f"Unexpected response for {model.__name__}")
        try:
            return model.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid {model.__name__} data received", errors=pydantic_errors(e)
            ) from e

    def _hydrate_list(self, model: Type[ModelT], response: Optional[Any]) -> List[ModelT]:
        items = self._unwrap(response)
        if not isinstance(items, list):
            return []
        return [self._hydrate(model, item) for item in items]

    @staticmethod
    def _raise_if_errors(message: str, errors: FieldErrors) -> None:
        if errors:
            raise ValidationError(message, errors=errors)


def pydantic_errors(error: pydantic.ValidationError) -> FieldErrors:
    """Convert a pydantic error into a field error map."""
    errors: FieldErrors = {}
    for item in error.errors():
        field = ".".join(str(part) for part in item["loc"]) or "__root__"
        errors.setdefault(field, []).append(item["msg"])
    return errors


def parse_date(value: Any) -> Optional[date]:
    """Parse a date string, returning None when it cannot be parsed."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return parse_datetime(str(value)).date()
    except (ValueError, OverflowError):
        return None


def is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
