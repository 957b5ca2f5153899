"""Payload conversion utilities for the cluster profile cleaner.

This module provides helpers for reading loosely typed Palette payloads:
- camelCase to snake_case dataclass initialization
- Nested field lookup that tolerates missing or null levels
- Length computation that never raises
"""
import re
from typing import Any
from typing import Iterable
from typing import Mapping
from typing import Optional
from typing import Type
from typing import TypeVar
from typing import Union

T = TypeVar("T")


def camelcase(cls: Type[T]) -> Type[T]:
    """
    Decorator to allow a dataclass to be initialized from camelCase keys.
    Must be placed above the @dataclass decorator.
    """

    def _camel_to_snake(name: str) -> str:
        """
        Converts a camelCase string to snake_case, correctly handling acronyms.
        """
        name = re.sub(r"(?<=[a-z0-9])([A-Z])", r"_\1", name)
        name = re.sub(r"([A-Z])([A-Z][a-z])", r"\1_\2", name)
        return name.lower()

    original_init = cls.__init__

    def __init__(self, *args, **kwargs: Any):
        if args:
            raise TypeError(
                f"{cls.__name__} only supports keyword arguments for initialization."
            )

        snake_case_kwargs = {_camel_to_snake(k): v for k, v in kwargs.items()}
        original_init(self, **snake_case_kwargs)

    cls.__init__ = __init__
    return cls


def dig(data: Any, *keys: str) -> Any:
    """Return data[k1][k2]... or None as soon as a level is missing or not a mapping."""
    current = data
    for key in keys:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def first_non_empty(values: Iterable[Any]) -> Optional[str]:
    """First value that is a non-empty string, or None."""
    for value in values:
        if isinstance(value, str) and value.strip():
            return value
    return None


def safe_len(value: Any) -> Union[int, float]:
    """
    Length of a list-like value. A number counts as its absolute value; None,
    booleans and anything else without a length count as 0.
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return abs(value)
    try:
        return len(value)
    except TypeError:
        return 0
