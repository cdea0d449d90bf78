# Copyright (c) Meta Platforms, Inc. and affiliates.
# All rights reserved.
"""Conversions between flat dataclasses and their persisted dictionaries.

A field may set `metadata={"field_name": ...}` to be stored under a different key
than its attribute name.
"""

import logging

from dataclasses import Field, fields, is_dataclass, MISSING
from typing import Any, cast, Dict, Hashable, Mapping, Type, TypeVar

from typeguard import typechecked

_TDataclass = TypeVar("_TDataclass")


def wire_name(field: "Field[Any]") -> str:
    return field.metadata.get("field_name", field.name)


def instantiate_dataclass(
    cls: Type[_TDataclass], data: Mapping[Hashable, Any], logger: logging.Logger
) -> _TDataclass:
    """Build `cls` from `data`. A field absent from `data` takes its default, or
    `None` with a warning if it has none; the constructor's callers validate.
    """
    if not is_dataclass(cls):
        raise TypeError(f"{type(cls).__name__} is not a dataclass.")
    kwargs = {}
    for field in fields(cls):
        key = wire_name(field)
        if key in data:
            kwargs[field.name] = data[key]
        elif field.default is not MISSING:
            kwargs[field.name] = field.default
        else:
            logger.warning(f"{cls.__name__} record is missing '{key}'")
            kwargs[field.name] = None
    return cast(_TDataclass, cls(**kwargs))


def asdict_with_field_names(obj: object) -> Dict[str, Any]:
    if not is_dataclass(obj) or isinstance(obj, type):
        raise TypeError(f"{type(obj).__name__} is not a dataclass instance.")
    return {wire_name(field): getattr(obj, field.name) for field in fields(obj)}


@typechecked
def check_str_fields(obj: object) -> None:
    """Raise `TypeError` unless every field of the dataclass `obj` holds a `str`."""
    if not is_dataclass(obj):
        raise TypeError(f"{type(obj).__name__} is not a dataclass.")
    for field in fields(obj):
        value = getattr(obj, field.name)
        if not isinstance(value, str):
            raise TypeError(
                f"Expected '{field.name}' of {type(obj).__name__} to be str, but got {type(value).__name__}"
            )


def remove_none_dict_factory(pairs: list[tuple[str, object]]) -> dict[str, object]:
    return {key: value for key, value in pairs if value is not None}
