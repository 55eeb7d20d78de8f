"""
Error taxonomy for scenario generation.

Each error carries a machine-readable `kind`, the HTTP status the API layer
answers with, a short summary and optional details. The API turns any
ScenarioServiceError into {"error", "kind", "details"}.
"""
from typing import Optional

GENERATION_FAILED = "Failed to generate scenarios"
NO_VALID_SCENARIOS = "No valid scenarios could be generated or parsed from the AI response."


class ScenarioServiceError(Exception):
    kind = "internal_error"
    status_code = 500
    summary = GENERATION_FAILED

    def __init__(self, details: Optional[str] = None, summary: Optional[str] = None):
        self.details = details
        if summary:
            self.summary = summary
        super().__init__(details or self.summary)

    def to_dict(self):
        body = {"error": self.summary, "kind": self.kind}
        if self.details:
            body["details"] = self.details
        return body


class InputError(ScenarioServiceError):
    kind = "input_error"
    status_code = 400
    summary = "Missing required fields"


class UpstreamError(ScenarioServiceError):
    kind = "upstream_error"
    status_code = 500
    summary = GENERATION_FAILED


class AllInvalidError(ScenarioServiceError):
    kind = "all_invalid"
    status_code = 500
    summary = NO_VALID_SCENARIOS


class ExtractionEmptyError(AllInvalidError):
    kind = "extraction_empty"

    def __init__(self, details: Optional[str] = "AI generated no content or unparsable content."):
        super().__init__(details)


class RateLimitError(ScenarioServiceError):
    kind = "rate_limited"
    status_code = 429
    summary = "Too many requests, please try again later."
