from typing import Optional, Protocol

import google.generativeai as genai

from scenario_generation.errors import UpstreamError
from utils.logger import get_logger

logger = get_logger(__name__)


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


class GeminiGenerator:
    """
    Text generation through Google Gemini.
    Any provider failure surfaces as UpstreamError; nothing is retried.
    """

    def __init__(
        self,
        api_key: Optional[str],
        model_name: str = "gemini-1.5-flash",
        temperature: float = 0.7,
        top_p: float = 1.0,
        top_k: int = 1,
        max_output_tokens: int = 2048,
        timeout_seconds: Optional[float] = None,
    ):
        self.api_key = api_key
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self.generation_config = {
            "temperature": temperature,
            "top_p": top_p,
            "top_k": top_k,
            "max_output_tokens": max_output_tokens,
        }

        if self.api_key:
            genai.configure(api_key=self.api_key)
        else:
            logger.warning("GEMINI_API_KEY not found. Scenario generation will fail until it is set.")

    @classmethod
    def from_settings(cls, settings) -> "GeminiGenerator":
        return cls(
            api_key=settings.GEMINI_API_KEY,
            model_name=settings.GEMINI_MODEL,
            temperature=settings.GEMINI_TEMPERATURE,
            top_p=settings.GEMINI_TOP_P,
            top_k=settings.GEMINI_TOP_K,
            max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
            timeout_seconds=settings.GEMINI_TIMEOUT_SECONDS,
        )

    async def generate(self, prompt: str) -> str:
        if not self.api_key:
            raise UpstreamError("Server misconfigured: Missing AI Key")

        model = genai.GenerativeModel(
            model_name=self.model_name,
            generation_config=self.generation_config,
        )

        request_options = {"timeout": self.timeout_seconds} if self.timeout_seconds else None

        try:
            response = await model.generate_content_async(prompt, request_options=request_options)
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            raise UpstreamError(str(e)) from e

        try:
            return response.text
        except Exception as e:
            # Blocked or empty candidates make .text raise
            logger.warning(f"Gemini returned no usable text: {e}")
            raise UpstreamError(f"AI returned no usable text: {e}") from e
