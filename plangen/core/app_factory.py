"""Application factory for the FastAPI app.

Acts as the composition root: builds the rate limiter, the plan store, the
LLM client and the plan service, attaches them to ``app.state``, and owns the
background sweep tasks through the lifespan.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Mapping

from fastapi import FastAPI

from plangen.adapters.llm.base import AbstractLLMClient
from plangen.adapters.llm.factory import create_llm_client
from plangen.adapters.rate_limit.base import (
    RATE_LIMITS,
    AbstractRateLimiter,
    RateLimitPolicy,
)
from plangen.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from plangen.adapters.storage.base import AbstractPlanStore
from plangen.adapters.storage.in_memory import InMemoryPlanStore
from plangen.api.routes import health_router, plans_router
from plangen.core.config import settings
from plangen.core.errors import ValidationAppError
from plangen.core.exception_handlers import setup_exception_handlers
from plangen.core.logging import configure_logging
from plangen.core.middleware import request_id_middleware
from plangen.core.openapi import apply_openapi_customizations
from plangen.core.scheduler import PeriodicTask
from plangen.services.plan_service import PlanService

logger = logging.getLogger(__name__)


def _default_llm_client() -> AbstractLLMClient | None:
    try:
        return create_llm_client()
    except ValidationAppError as exc:
        # The app still serves sharing routes; generation reports 500
        logger.warning("llm.not_configured", extra={"error_code": exc.code})
        return None


def create_app(
    *,
    llm_client: AbstractLLMClient | None = None,
    rate_limiter: AbstractRateLimiter | None = None,
    plan_store: AbstractPlanStore | None = None,
    rate_limit_policies: Mapping[str, RateLimitPolicy] | None = None,
    configure_logs: bool = True,
) -> FastAPI:
    """Create and configure the FastAPI application instance.

    Components not passed in are built from settings.

    Args:
        llm_client: LLM client used for plan generation.
        rate_limiter: Limiter shared by all costed routes.
        plan_store: Store backing short plan links.
        rate_limit_policies: Policy table; defaults to RATE_LIMITS.
        configure_logs: Install the root log handler.

    Returns:
        Configured FastAPI app with middleware, handlers and routers.
    """
    # Logging first so subsequent init logs are formatted as desired
    if configure_logs:
        configure_logging(settings.log)

    # Empty adapters are falsy through __len__
    limiter = rate_limiter if rate_limiter is not None else InMemoryFixedWindowRateLimiter()
    store = (
        plan_store
        if plan_store is not None
        else InMemoryPlanStore(
            ttl_seconds=settings.app.plan_ttl_seconds,
            max_attempts=settings.app.plan_id_max_attempts,
        )
    )
    llm = llm_client if llm_client is not None else _default_llm_client()

    sweepers = [
        PeriodicTask(
            "rate_limit.sweep",
            limiter.sweep,
            interval_seconds=settings.app.rate_limit_sweep_interval_seconds,
        ),
        PeriodicTask(
            "plan_store.sweep",
            store.sweep,
            interval_seconds=settings.app.plan_sweep_interval_seconds,
        ),
    ]

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        for sweeper in sweepers:
            await sweeper.start()
        logger.info(
            "app.startup",
            extra={"llm_configured": llm is not None, "env": settings.app_env},
        )
        try:
            yield
        finally:
            for sweeper in sweepers:
                await sweeper.stop()
            logger.info("app.shutdown")

    app = FastAPI(
        title="Project Plan Generator API",
        description=(
            "Turns a short idea into a Markdown project plan using an LLM, "
            "shares plans through compressed URL tokens or short in-memory ids, "
            "and prints the create-vibe-code-app command that scaffolds the project."
        ),
        version="0.1.0",
        license_info={
            "name": "MIT License",
            "url": "https://opensource.org/licenses/MIT",
        },
        lifespan=lifespan,
    )

    app.state.rate_limiter = limiter
    app.state.rate_limit_policies = dict(
        rate_limit_policies if rate_limit_policies is not None else RATE_LIMITS
    )
    app.state.plan_store = store
    app.state.plan_service = PlanService(llm=llm)
    app.state.sweepers = sweepers

    # Middleware
    app.middleware("http")(request_id_middleware)

    # Exception handlers
    setup_exception_handlers(app)

    # Routers
    app.include_router(plans_router, prefix="/api")
    app.include_router(health_router)

    apply_openapi_customizations(app)

    return app
