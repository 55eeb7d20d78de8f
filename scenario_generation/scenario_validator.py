from typing import List, Optional, Tuple

from scenario_generation.models import Scenario, ValidationOutcome
from utils.logger import get_logger

logger = get_logger(__name__)

MIN_PRESENTATION_LENGTH = 20
MIN_QUESTION_LENGTH = 10
MIN_ANSWER_LENGTH = 20
SBA_OPTION_COUNT = 5
OSCE_MIN_CRITERIA = 5


def validate_scenario(scenario: Scenario, fmt: str) -> Optional[List[str]]:
    """
    Structural checks for one candidate.
    Every rule is evaluated; returns None when all pass, otherwise the list of violations.
    """
    errors = []

    if len(scenario.presentation.strip()) < MIN_PRESENTATION_LENGTH:
        errors.append("Missing or too short patient presentation")

    if len(scenario.question.strip()) < MIN_QUESTION_LENGTH:
        errors.append("Missing or too short question section")

    if len(scenario.answer.strip()) < MIN_ANSWER_LENGTH:
        errors.append("Missing or too short answer section")

    if fmt == "sba" and len(scenario.options) != SBA_OPTION_COUNT:
        errors.append(f"SBA format requires exactly {SBA_OPTION_COUNT} options (found {len(scenario.options)})")

    if fmt == "osce" and len(scenario.marking_criteria) < OSCE_MIN_CRITERIA:
        errors.append(f"OSCE format requires at least {OSCE_MIN_CRITERIA} marking criteria")

    return errors or None


def validate_candidates(candidates: List[Scenario], fmt: str) -> List[ValidationOutcome]:
    return [
        ValidationOutcome(scenario=candidate, errors=validate_scenario(candidate, fmt))
        for candidate in candidates
    ]


def partition_outcomes(outcomes: List[ValidationOutcome]) -> Tuple[List[Scenario], List[ValidationOutcome]]:
    """Splits outcomes into (accepted scenarios, rejected outcomes)."""
    accepted = [o.scenario for o in outcomes if o.is_valid]
    rejected = [o for o in outcomes if not o.is_valid]

    if rejected:
        logger.warning(
            "Some scenarios failed validation and were excluded: "
            + "; ".join(f"Scenario {o.scenario.id}: {o.message}" for o in rejected)
        )

    return accepted, rejected
