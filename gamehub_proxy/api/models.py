from __future__ import annotations

from typing import Any, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, ValidationError

from ..domain.errors import BadRequestError
from ..service.rewriter import InboundRequest

__all__ = [
    "PageRequest",
    "NewsDetailRequest",
    "TopicMoreRequest",
    "ComponentListRequest",
    "parse_body",
]

M = TypeVar("M", bound=BaseModel)


class _ClientBody(BaseModel):
    # Clients send signing fields (token, sign, time) alongside the payload.
    model_config = ConfigDict(extra="allow")


class PageRequest(_ClientBody):
    """A paged listing request. Missing or zero values fall back to defaults."""
    page: Optional[int] = None
    page_size: Optional[int] = None


class NewsDetailRequest(_ClientBody):
    id: Optional[Union[int, str]] = None
    source: Optional[str] = None


class TopicMoreRequest(PageRequest):
    """Next page of cards for one topic."""
    id: Optional[Union[int, str]] = None


class ComponentListRequest(PageRequest):
    """Paged component manifest; ``type`` is validated against the manifest table."""
    type: Any = None


def parse_body(model: type[M], request: InboundRequest) -> M:
    """Validate the request's JSON body into ``model`` or raise BadRequestError."""
    try:
        return model.model_validate(request.json_object())
    except ValidationError as e:
        raise BadRequestError("Invalid request body") from e
