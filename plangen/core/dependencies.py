"""FastAPI dependencies resolving components owned by the app factory."""

from __future__ import annotations

from fastapi import Request

from plangen.adapters.storage.base import AbstractPlanStore
from plangen.services.plan_service import PlanService


def get_plan_store(request: Request) -> AbstractPlanStore:
    return request.app.state.plan_store


def get_plan_service(request: Request) -> PlanService:
    return request.app.state.plan_service
