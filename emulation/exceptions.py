"""
Error taxonomy shared by both persistence backends and the HTTP layer.

    EmulationError (base)
    ├── DuplicateKey      → 400  unique code/username collision
    ├── NotFound          → 400  referenced entity missing
    ├── ValidationError   → 400  malformed category, blank required field
    └── Unauthorized      → 401  no admin/student session

The handlers that turn these into ``{"error": message}`` responses live in
``emulation.main``.
"""
from __future__ import annotations

from typing import Any, Dict, Optional


class EmulationError(Exception):
    """Base for every error the repositories raise on purpose."""

    def __init__(self, message: str = "An unexpected error occurred", context: Optional[Dict[str, Any]] = None):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class DuplicateKey(EmulationError):
    def __init__(self, field: str, value: Any, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        ctx.update({"field": field, "value": value})
        super().__init__(message=f"{field} '{value}' already exists", context=ctx)
        self.field = field
        self.value = value


class NotFound(EmulationError):
    def __init__(self, resource: str = "resource", resource_id: Any = None, context: Optional[Dict[str, Any]] = None):
        message = f"The requested {resource} was not found"
        if resource_id is not None:
            message = f"{resource} with ID '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = str(resource_id)
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ValidationError(EmulationError):
    def __init__(self, message: str = "Validation failed", field: Optional[str] = None, context: Optional[Dict[str, Any]] = None):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class Unauthorized(EmulationError):
    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message=message)
