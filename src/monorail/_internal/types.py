"""Shared type aliases used across monorail modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: user-defined function, arguments resolved by type
Handler: TypeAlias = Callable[..., Any]

# Converter: maps a raw path variable (plus injected services) to a value
Converter: TypeAlias = Callable[..., Any]

# Error handler: injected like a route handler, selected by status code
ErrorHandler: TypeAlias = Callable[..., Any]
