"""Shared serialization utilities for sinks."""

from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def to_dict(obj: Any, money_quantum: Decimal | None = None) -> dict:
    """Convert object to dictionary, preferring the object's own ``to_dict``."""
    if callable(getattr(obj, "to_dict", None)):
        return obj.to_dict(money_quantum)
    elif is_dataclass(obj):
        return dataclass_to_dict(obj, money_quantum)
    elif isinstance(obj, dict):
        return obj
    else:
        return {"value": str(obj)}


def dataclass_to_dict(obj: Any, money_quantum: Decimal | None = None) -> dict:
    """Convert dataclass to dict with proper serialization."""
    result = {}
    for key, value in asdict(obj).items():
        result[key] = serialize_value(value, money_quantum)
    return result


def serialize_value(value: Any, money_quantum: Decimal | None = None) -> Any:
    """Serialize a value for JSON output.

    Decimals become strings so no precision is lost, rounded to
    ``money_quantum`` when one is given.
    """
    if isinstance(value, Decimal):
        if money_quantum is not None:
            value = value.quantize(money_quantum)
        return str(value)
    elif isinstance(value, Enum):
        return value.value
    elif isinstance(value, datetime):
        return value.isoformat()
    elif isinstance(value, date):
        return value.isoformat()
    elif isinstance(value, dict):
        return {k: serialize_value(v, money_quantum) for k, v in value.items()}
    elif isinstance(value, list):
        return [serialize_value(v, money_quantum) for v in value]
    return value
