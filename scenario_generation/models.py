from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List, Dict, Any

DIFFICULTIES = ("basic", "intermediate", "advanced")
FORMATS = ("long", "short", "sba", "osce")

DEFAULT_LANGUAGE = "English"
DEFAULT_FORMAT = "long"


class ScenarioRequest(BaseModel):
    """One generation request, already checked by the HTTP layer."""
    topic: str
    count: int
    difficulty: str
    format: str = DEFAULT_FORMAT
    language: str = DEFAULT_LANGUAGE

    model_config = ConfigDict(frozen=True)


class Scenario(BaseModel):
    id: str = "0"
    presentation: str = ""
    question: str = ""
    answer: str = ""
    options: List[str] = []
    # camelCase on the wire, as the frontend expects
    marking_criteria: List[str] = Field(default_factory=list, alias="markingCriteria")

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def blank(cls, scenario_id: str = "0") -> "Scenario":
        return cls(id=scenario_id)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ValidationOutcome(BaseModel):
    scenario: Scenario
    errors: Optional[List[str]] = None

    @property
    def is_valid(self) -> bool:
        return self.errors is None

    @property
    def message(self) -> Optional[str]:
        return ", ".join(self.errors) if self.errors else None


class ScenarioBatch(BaseModel):
    """Result of one pipeline run: accepted scenarios plus diagnostics."""
    request: ScenarioRequest
    scenarios: List[Scenario]
    rejected: List[ValidationOutcome] = []
    surplus_count: int = 0
    detected_count: int = 0
    generated_at: str

    def to_response(self) -> Dict[str, Any]:
        return {
            "success": True,
            "scenarios": [s.to_response() for s in self.scenarios],
            "metadata": {
                "topic": self.request.topic,
                "requested_count": self.request.count,
                "generated_count": len(self.scenarios),
                "difficulty": self.request.difficulty,
                "format": self.request.format,
                "language": self.request.language,
                "generatedAt": self.generated_at,
                "detected_count": self.detected_count,
                "surplus_count": self.surplus_count,
                "rejected": [
                    {"id": r.scenario.id, "errors": r.errors} for r in self.rejected
                ],
            },
        }
