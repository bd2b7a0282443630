"""
Helpers shared by the request handlers: field checks and result rendering.
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, Dict, Mapping, Optional

from ..faults import ServiceResult
from ..http import Response, ValidationFault
from ..models import primary_key

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def snake_case(name: str) -> str:
    """``prodNameEn`` -> ``prod_name_en``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def require(data: Mapping[str, Any], name: str, message: str) -> str:
    """``data[name]``, or a 400 carrying ``message`` when it is missing, blank or not text."""
    value = data.get(name)
    if blank(value) or not isinstance(value, str):
        raise ValidationFault(message, field=name)
    return value


def optional(data: Mapping[str, Any], name: str, message: str) -> Optional[str]:
    """Text value of ``data[name]``; None when missing or blank."""
    value = data.get(name)
    if blank(value):
        return None
    if not isinstance(value, str):
        raise ValidationFault(message, field=name)
    return value


def identifier(data: Mapping[str, Any], name: str, message: str) -> int:
    """Record id from a JSON integer or a digit string."""
    pk = primary_key(data.get(name))
    if pk is None:
        raise ValidationFault(message, field=name)
    return pk


def number(value: Any, message: str) -> float:
    """Numeric value of a JSON number or form string."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise ValidationFault(message)
    try:
        result = float(value)
    except ValueError:
        raise ValidationFault(message)
    if not math.isfinite(result):
        raise ValidationFault(message)
    return result


def respond(
    result: ServiceResult,
    status: int = 200,
    body: Optional[Callable[[ServiceResult], Dict[str, Any]]] = None,
    **fields: Any,
) -> Response:
    """
    Render a service result.

    Failures become ``{"message": ...}`` with the result's error code as
    status. Successes render ``fields``, or ``body(result)`` when given.
    """
    if not result.ok:
        return Response.error(result.error_message, result.error_code)
    return Response.json(body(result) if body is not None else fields, status=status)
