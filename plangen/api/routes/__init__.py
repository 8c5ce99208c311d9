from __future__ import annotations

from plangen.api.routes.health import router as health_router
from plangen.api.routes.plans import router as plans_router

__all__ = ["health_router", "plans_router"]
