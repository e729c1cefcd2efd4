"""
Shared helpers for the NetBird tool modules.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, model_validator

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class NullAsDefaultModel(BaseModel):
    """
    The API sends null for empty lists and strings; a null on a declared
    field falls back to that field's default.
    """

    @model_validator(mode="before")
    @classmethod
    def _null_as_default(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None or k not in cls.model_fields}
        return data


class NetbirdEntity(NullAsDefaultModel):
    """Base for API response models. Fields the API adds later pass through."""
    model_config = ConfigDict(extra="allow")


def parse_input(model_cls: Type[M], input_data: Union[Dict[str, Any], M, None]) -> M:
    """Accept either a dictionary or an already-built input model."""
    if input_data is None:
        return model_cls()
    if isinstance(input_data, model_cls):
        return input_data
    return model_cls(**input_data)


def request_body(model: BaseModel, exclude: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Build a JSON request body from an input model.

    Path parameters listed in ``exclude`` and fields left as None are
    omitted, so partial updates only send what the caller provided.
    """
    return model.model_dump(mode="json", by_alias=True, exclude_none=True, exclude=set(exclude))


def decode(model_cls: Type[NetbirdEntity], data: Any) -> Optional[Dict[str, Any]]:
    if data is None:
        return None
    return model_cls.model_validate(data).model_dump(mode="json", by_alias=True, exclude_none=True)


def decode_list(model_cls: Type[NetbirdEntity], data: Any) -> List[Dict[str, Any]]:
    return [decode(model_cls, item) for item in (data or [])]


def deleted(**ids: str) -> Dict[str, str]:
    """Acknowledgement returned by every delete operation."""
    return {"status": "deleted", **ids}
