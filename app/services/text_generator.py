"""Narrative text generation - interface plus Gemini and mock implementations."""

import logging
from abc import ABC, abstractmethod

import httpx

from app.config import Settings
from app.exceptions import ReportGenerationConfigError
from app.schemas import GeneratedText

logger = logging.getLogger(__name__)


class TextGenerator(ABC):
    """Abstract interface for the report-writing model."""

    @abstractmethod
    async def generate(self, prompt: str) -> GeneratedText:
        """Return generated text for *prompt*."""


class GeminiTextGenerator(TextGenerator):
    """Calls the Gemini ``generateContent`` REST endpoint over HTTP."""

    provider = "google-gemini"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str) -> GeneratedText:
        if not self._api_key:
            raise ReportGenerationConfigError(
                "GEMINI_API_KEY is not configured; set it to generate reports"
            )

        payload = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "generationConfig": {
                "maxOutputTokens": 2048,
                "temperature": 0.3,
                "topP": 0.95,
            },
        }
        url = f"{self._base_url}/models/{self._model}:generateContent"
        logger.debug("Sending report prompt to %s (%d chars)", self._model, len(prompt))
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                resp = await client.post(
                    url, json=payload, headers={"x-goog-api-key": self._api_key}
                )
                resp.raise_for_status()
                body = resp.json()
        except httpx.HTTPError as e:
            logger.error("Text generator request failed: %s", e)
            raise ReportGenerationConfigError(f"Text generator unavailable: {e}") from e
        except ValueError as e:
            logger.error("Text generator returned invalid JSON: %s", e)
            raise ReportGenerationConfigError("Text generator returned invalid JSON") from e

        text = self._extract_text(body)
        if not text:
            logger.error(
                "Text generator returned no text (promptFeedback=%s)",
                body.get("promptFeedback"),
            )
            raise ReportGenerationConfigError("Text generator returned no text content")

        return GeneratedText(text=text, provider=self.provider, model=self._model)

    @staticmethod
    def _extract_text(body: dict) -> str | None:
        for candidate in body.get("candidates") or []:
            parts = (candidate.get("content") or {}).get("parts") or []
            joined = "\n".join(
                p["text"] for p in parts if isinstance(p.get("text"), str) and p["text"]
            ).strip()
            if joined:
                return joined
        return None


class MockTextGenerator(TextGenerator):
    """Deterministic stand-in for development and tests."""

    provider = "mock"

    def __init__(self) -> None:
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> GeneratedText:
        self.prompts.append(prompt)
        text = (
            "Resumen General del Estudiante\n"
            "El estudiante mantiene un ritmo de trabajo constante.\n\n"
            "🌟 Puntos Fuertes\nSin datos suficientes (mock).\n\n"
            "⚠️ A Reforzar\nSin datos suficientes (mock).\n\n"
            "💡 Recomendación\nContinuar practicando con regularidad."
        )
        return GeneratedText(text=text, provider=self.provider, model="mock")


def build_text_generator(settings: Settings) -> TextGenerator:
    """Factory: returns mock or Gemini generator based on config."""
    if settings.USE_MOCK_TEXT_GENERATOR:
        logger.info("Using MockTextGenerator")
        return MockTextGenerator()
    logger.info("Using GeminiTextGenerator -> %s", settings.GEMINI_MODEL)
    return GeminiTextGenerator(
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        base_url=settings.GEMINI_API_URL,
        timeout=settings.TEXT_GENERATOR_TIMEOUT,
    )
