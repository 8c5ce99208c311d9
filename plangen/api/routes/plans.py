import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import PlainTextResponse

from plangen.adapters.rate_limit.base import (
    AI_GENERATION,
    PLAN_RETRIEVAL,
    PLAN_STORAGE,
    RateLimitResult,
)
from plangen.adapters.storage.base import AbstractPlanStore
from plangen.core.config import settings
from plangen.core.dependencies import get_plan_service, get_plan_store
from plangen.core.errors import PlanNotFoundError, ValidationAppError
from plangen.core.rate_limit import enforce_rate_limit, get_client_key, rate_limit_headers
from plangen.schemas.plan import (
    EncodePlanRequest,
    GeneratePlanRequest,
    GeneratePlanResponse,
    PlanContentResponse,
    SharedPlanResponse,
    StorePlanRequest,
    StorePlanResponse,
    ValidateIdeaRequest,
    ValidateIdeaResponse,
)
from plangen.services.plan_service import PlanService
from plangen.services.sharing import build_short_url, share_plan
from plangen.utils.codec import try_decode_plan
from plangen.utils.validators import (
    is_valid_plan_id,
    validate_plan_content,
    validate_project_idea,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Plans"])

# Raw Markdown is public and immutable for a given token/id
RAW_PLAN_HEADERS = {
    "Cache-Control": "public, max-age=86400",
    "Access-Control-Allow-Origin": "*",
}

IDEA_SUGGESTIONS_VALID = [
    "Consider adding more specific details about your target users.",
    "Think about the main features you want to prioritize.",
]
IDEA_SUGGESTIONS_INVALID = [
    "Please provide more details about your project idea.",
    "Ensure your idea is between 20-1000 characters.",
    "Focus on describing the problem you want to solve.",
]


@router.post("/generate-plan", response_model=GeneratePlanResponse)
async def generate_plan(
    body: GeneratePlanRequest,
    _limit: RateLimitResult | None = Depends(enforce_rate_limit(AI_GENERATION)),
    service: PlanService = Depends(get_plan_service),
) -> GeneratePlanResponse:
    """Generate a Markdown plan from an idea and return its share links.

    Raises:
        ValidationAppError: 400 if the idea is rejected.
        LLMAppError: 500 if the model call fails.
    """
    plan = await service.generate(body.idea, body.template)
    bundle = share_plan(plan, template=body.template)
    return GeneratePlanResponse(
        plan=plan,
        token=bundle.token,
        share_url=bundle.share_url,
        raw_url=bundle.raw_url,
        cli_command=bundle.cli_command,
    )


@router.post("/ideas/validate", response_model=ValidateIdeaResponse)
async def validate_idea(body: ValidateIdeaRequest) -> ValidateIdeaResponse:
    """Check an idea without calling the LLM."""
    result = validate_project_idea(
        body.idea,
        min_chars=settings.app.min_idea_chars,
        max_chars=settings.app.max_idea_chars,
    )
    return ValidateIdeaResponse(
        valid=result.valid,
        error=result.error,
        suggestions=IDEA_SUGGESTIONS_VALID if result.valid else IDEA_SUGGESTIONS_INVALID,
    )


@router.post("/plans/encode", response_model=SharedPlanResponse)
async def encode_plan_for_sharing(body: EncodePlanRequest) -> SharedPlanResponse:
    """Encode an existing plan into a token link and CLI command."""
    if len(body.content) > settings.app.max_plan_chars:
        raise ValidationAppError(
            code="plan_too_large",
            message="Content exceeds maximum size limit",
            details={"max_value": settings.app.max_plan_chars, "actual_value": len(body.content)},
        )

    bundle = share_plan(body.content, template=body.template)
    return SharedPlanResponse(
        token=bundle.token,
        share_url=bundle.share_url,
        raw_url=bundle.raw_url,
        cli_command=bundle.cli_command,
    )


@router.post(
    "/plans/store",
    response_model=StorePlanResponse,
    status_code=status.HTTP_201_CREATED,
)
async def store_plan(
    body: StorePlanRequest,
    request: Request,
    limit: RateLimitResult | None = Depends(enforce_rate_limit(PLAN_STORAGE)),
    store: AbstractPlanStore = Depends(get_plan_store),
) -> StorePlanResponse:
    """Store a plan in memory and return its short id.

    Raises:
        ValidationAppError: 400 if the content is not a plausible plan.
        CapacityError: 500 if no unique id could be allocated.
    """
    validation = validate_plan_content(
        body.content,
        min_chars=settings.app.min_plan_chars,
        max_chars=settings.app.max_plan_chars,
    )
    if not validation.valid:
        raise ValidationAppError(
            code=validation.code or "invalid_plan",
            message=validation.error or "Invalid plan content",
        )

    plan_id = store.put(body.content, originator_key=get_client_key(request))

    if limit is not None:
        remaining = limit.remaining
    else:
        remaining = request.app.state.rate_limit_policies[PLAN_STORAGE].max_requests

    return StorePlanResponse(
        id=plan_id,
        share_url=build_short_url(settings.app.public_base_url, plan_id),
        remaining_requests=remaining,
    )


@router.get(
    "/plans/{plan_id}",
    response_model=PlanContentResponse,
    responses={200: {"content": {"text/plain": {}}}},
)
async def get_stored_plan(
    plan_id: str,
    request: Request,
    limit: RateLimitResult | None = Depends(enforce_rate_limit(PLAN_RETRIEVAL)),
    store: AbstractPlanStore = Depends(get_plan_store),
):
    """Fetch a stored plan as JSON, or as raw Markdown for ``Accept: text/plain``.

    Raises:
        ValidationAppError: 400 for malformed ids.
        PlanNotFoundError: 404 for unknown or expired ids.
    """
    if not is_valid_plan_id(plan_id):
        raise ValidationAppError(code="invalid_plan_id", message="Invalid plan ID format")

    content = store.get(plan_id)
    if content is None:
        logger.info("plan_store.miss", extra={"plan_id": plan_id})
        raise PlanNotFoundError(code="plan_not_found", message="Plan not found or expired")

    if request.headers.get("accept", "").startswith("text/plain"):
        headers = dict(RAW_PLAN_HEADERS)
        if limit is not None and settings.app.rate_limit_include_headers:
            headers.update(rate_limit_headers(limit))
        return PlainTextResponse(content, headers=headers)

    return PlanContentResponse(content=content)


@router.get("/plan/{params:path}", response_class=PlainTextResponse)
async def get_plan_from_token(params: str) -> PlainTextResponse:
    """Serve the raw Markdown encoded in the last path segment.

    Raises:
        PlanNotFoundError: 404 when the token cannot be decoded.
    """
    token = params.rstrip("/").rsplit("/", 1)[-1]
    content = try_decode_plan(token, max_bytes=settings.app.max_decoded_bytes) if token else None
    if content is None:
        raise PlanNotFoundError(code="plan_not_found", message="Plan not found or invalid")

    return PlainTextResponse(content, headers=RAW_PLAN_HEADERS)
