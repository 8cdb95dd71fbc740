from typing import Any, Dict

from fastapi import Request

from .exceptions import Unauthorized
from .store import Store


def get_store(request: Request) -> Store:
    """Dependency to provide the store the app was built with."""
    return request.app.state.store


def require_admin(request: Request) -> Dict[str, Any]:
    """Dependency that ensures an admin session exists."""
    admin = request.session.get("admin")
    if not admin:
        raise Unauthorized()
    return admin


def require_student(request: Request) -> Dict[str, Any]:
    """Dependency that ensures a student session exists."""
    student = request.session.get("student")
    if not student:
        raise Unauthorized()
    return student
