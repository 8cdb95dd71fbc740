import os

from fastapi import Request
from fastapi.templating import Jinja2Templates

templates = Jinja2Templates(directory=os.path.join(os.path.dirname(__file__), "templates"))


def render_template(request: Request, template_name: str, context: dict | None = None):
    # Standard context variables; provided context takes precedence
    standard_context = {
        "config": request.app.state.settings,
        "session_type": (
            "admin" if request.session.get("admin")
            else "student" if request.session.get("student")
            else None
        ),
    }
    return templates.TemplateResponse(request, template_name, {**standard_context, **(context or {})})
