import json
from datetime import datetime, timezone

from scenario_generation.errors import AllInvalidError, ExtractionEmptyError, UpstreamError
from scenario_generation.gemini_client import TextGenerator
from scenario_generation.models import ScenarioBatch, ScenarioRequest
from scenario_generation.prompts import build_scenario_prompt
from scenario_generation.scenario_extractor import extract_scenarios
from scenario_generation.scenario_validator import partition_outcomes, validate_candidates
from utils.logger import get_logger

logger = get_logger(__name__)


class ScenarioPipeline:
    """
    Orchestrates one generation request:
    Build Prompt -> Model Call -> Extract Candidates -> Validate -> Batch

    Holds no per-request state, so one instance serves concurrent requests.
    """

    def __init__(self, generator: TextGenerator):
        self.generator = generator

    async def run(self, request: ScenarioRequest) -> ScenarioBatch:
        prompt = build_scenario_prompt(request)

        logger.info(
            f"Generating {request.count} {request.format} scenarios "
            f"({request.difficulty}, {request.language}) for topic: {request.topic}"
        )

        try:
            raw_text = await self.generator.generate(prompt)
        except UpstreamError:
            raise
        except Exception as e:
            raise UpstreamError(str(e)) from e

        logger.debug(f"RAW AI RESPONSE TEXT:\n{raw_text}")

        candidates = extract_scenarios(raw_text, request.format)
        detected_count = len(candidates)

        outcomes = validate_candidates(candidates, request.format)
        accepted, rejected = partition_outcomes(outcomes)

        if not accepted and request.count > 0:
            if not rejected:
                raise ExtractionEmptyError()
            details = [{"id": o.scenario.id, "errors": o.message} for o in rejected]
            raise AllInvalidError(
                f"All generated scenarios failed validation: {json.dumps(details)}"
            )

        surplus = accepted[request.count:]
        if surplus:
            logger.warning(
                f"AI returned {len(accepted)} valid scenarios for {request.count} requested. "
                f"Keeping the first {request.count}."
            )
            accepted = accepted[:request.count]

        logger.info(f"Returning {len(accepted)} of {request.count} requested scenarios")

        return ScenarioBatch(
            request=request,
            scenarios=accepted,
            rejected=rejected,
            surplus_count=len(surplus),
            detected_count=detected_count,
            generated_at=datetime.now(timezone.utc).isoformat(),
        )
