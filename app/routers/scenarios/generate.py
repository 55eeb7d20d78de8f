from fastapi import APIRouter, Depends, Request

from app.core.rate_limit import enforce_rate_limit
from app.routers.scenarios.schemas import GenerateScenariosRequest
from scenario_generation.errors import InputError, ScenarioServiceError
from scenario_generation.models import (
    DEFAULT_FORMAT,
    DEFAULT_LANGUAGE,
    DIFFICULTIES,
    FORMATS,
    ScenarioRequest,
)
from scenario_generation.scenario_pipeline import ScenarioPipeline
from utils.logger import get_logger

router = APIRouter()
logger = get_logger(__name__)


def get_scenario_pipeline(request: Request) -> ScenarioPipeline:
    return request.app.state.scenario_pipeline


def build_scenario_request(payload: GenerateScenariosRequest, max_count: int) -> ScenarioRequest:
    """
    Checks the raw body and builds the immutable ScenarioRequest.
    Raises InputError for missing, unknown or out-of-range values.
    """
    topic = (payload.topic or "").strip()
    if not topic or not payload.count or not payload.difficulty:
        raise InputError()

    if payload.count < 1:
        raise InputError("count must be a positive integer", summary="Invalid count")
    if payload.count > max_count:
        raise InputError(f"count must be at most {max_count}", summary="Invalid count")

    difficulty = payload.difficulty.strip().lower()
    if difficulty not in DIFFICULTIES:
        raise InputError(
            f"difficulty must be one of: {', '.join(DIFFICULTIES)}",
            summary=f"Unsupported difficulty: {payload.difficulty}",
        )

    fmt = (payload.format or DEFAULT_FORMAT).strip().lower()
    if fmt not in FORMATS:
        raise InputError(
            f"format must be one of: {', '.join(FORMATS)}",
            summary=f"Unsupported format: {payload.format}",
        )

    language = (payload.language or "").strip() or DEFAULT_LANGUAGE

    return ScenarioRequest(
        topic=topic,
        count=payload.count,
        difficulty=difficulty,
        format=fmt,
        language=language,
    )


@router.post("/generate", dependencies=[Depends(enforce_rate_limit)])
async def generate_scenarios(
    payload: GenerateScenariosRequest,
    request: Request,
    pipeline: ScenarioPipeline = Depends(get_scenario_pipeline),
):
    settings = request.app.state.settings
    scenario_request = build_scenario_request(payload, settings.MAX_SCENARIOS_PER_REQUEST)

    try:
        batch = await pipeline.run(scenario_request)
    except ScenarioServiceError:
        raise
    except Exception as e:
        logger.exception(f"Scenario generation failed: {e}")
        raise ScenarioServiceError(str(e))

    return batch.to_response()
