import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar, Union

log = logging.getLogger('ldfirehose')

JSONValue = Union[None, bool, int, float, str, List['JSONValue'], Dict[str, 'JSONValue']]

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True)
class _Success(Generic[T]):
    value: T


@dataclass(frozen=True)
class _Fail(Generic[E]):
    error: E
    exception: Optional[Exception] = None


_Result = Union[_Success[T], _Fail[E]]


def to_json(value: Any) -> str:
    """
    Encodes a value in the compact form used on the wire. NaN and infinite floats are
    rejected, since they are not valid JSON.
    """
    return json.dumps(value, separators=(',', ':'), allow_nan=False)


def is_json_encodable(value: Any) -> bool:
    try:
        to_json(value)
        return True
    except (TypeError, ValueError, RecursionError):
        return False


def normalize_json(value: Any) -> JSONValue:
    """
    Returns the value as it reads back from the wire: tuples become lists and mapping keys
    become strings. Raises the same errors as :func:`to_json` for values that cannot be encoded.
    """
    return json.loads(to_json(value))
