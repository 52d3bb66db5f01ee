"""JSON codec used to encode request bodies and decode response payloads."""

from functools import lru_cache
from typing import Any, Protocol, TypeVar, runtime_checkable

from pydantic import TypeAdapter

T = TypeVar("T")


@runtime_checkable
class JSONCodec(Protocol):
    """Encodes values to bytes and decodes bytes back to a requested type.

    Implementations signal failures by raising; the client turns those into
    ``EncodingFailedError`` / ``DecodingFailedError``.
    """

    def encode(self, value: Any) -> bytes: ...

    def decode(self, data: bytes, type_: type[T]) -> T: ...


@lru_cache(maxsize=256)
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


class PydanticJSONCodec:
    """Default codec backed by pydantic ``TypeAdapter``.

    Works with pydantic models, dataclasses, TypedDicts and plain builtin
    types. ``by_alias`` and ``exclude_none`` control how models are dumped.
    """

    def __init__(self, *, by_alias: bool = True, exclude_none: bool = False) -> None:
        self.by_alias = by_alias
        self.exclude_none = exclude_none

    def encode(self, value: Any) -> bytes:
        return _adapter(type(value)).dump_json(
            value, by_alias=self.by_alias, exclude_none=self.exclude_none
        )

    def decode(self, data: bytes, type_: type[T]) -> T:
        return _adapter(type_).validate_json(data)
