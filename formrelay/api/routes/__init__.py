from __future__ import annotations

from formrelay.api.routes.forms import router as forms_router
from formrelay.api.routes.health import router as health_router

__all__ = ["forms_router", "health_router"]
