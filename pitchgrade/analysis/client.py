"""Chat-completion client for pitch summaries and scored pitch analysis."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from openai import APIConnectionError, APIResponseValidationError, APIStatusError, AsyncOpenAI
from pydantic import ValidationError

from pitchgrade.analysis.models import PitchAnalysis, PitchIdea
from pitchgrade.analysis.prompts import (
    ANALYSIS_SYSTEM_PROMPT,
    SUMMARY_SYSTEM_PROMPT,
    build_analysis_prompt,
    build_summary_prompt,
)
from pitchgrade.config import Settings
from pitchgrade.errors import (
    APIError,
    AuthenticationError,
    EmptyPitchTextError,
    MalformedResponseError,
    NetworkError,
    RateLimitError,
)

logger = logging.getLogger(__name__)


class AnalysisClient:
    """Thin wrapper over an OpenAI-compatible ``/chat/completions`` endpoint.

    Every call is a single attempt: the SDK's automatic retries are disabled and
    failures surface as ``AnalysisServiceError`` subclasses.
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4",
        temperature: float = 0.7,
        summary_max_tokens: int = 500,
        timeout: float | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        client_kwargs: dict[str, Any] = {
            "api_key": api_key,
            "base_url": base_url,
            "max_retries": 0,
        }
        if timeout is not None:
            client_kwargs["timeout"] = timeout
        if http_client is not None:
            client_kwargs["http_client"] = http_client

        self._client = AsyncOpenAI(**client_kwargs)
        self.model = model
        self.temperature = temperature
        self.summary_max_tokens = summary_max_tokens

    @classmethod
    def from_settings(
        cls, settings: Settings, http_client: httpx.AsyncClient | None = None
    ) -> AnalysisClient:
        return cls(
            settings.openai_api_key,
            base_url=settings.openai_base_url,
            model=settings.llm_model,
            temperature=settings.llm_temperature,
            summary_max_tokens=settings.summary_max_tokens,
            timeout=settings.request_timeout_seconds,
            http_client=http_client,
        )

    async def aclose(self) -> None:
        await self._client.close()

    async def generate_summary(self, idea: PitchIdea) -> str:
        """Return a natural-language summary of the questionnaire answers.

        Raises:
            AnalysisServiceError: On transport failure, non-200 status, or an
                unusable response body.
        """
        messages = [
            {"role": "system", "content": SUMMARY_SYSTEM_PROMPT},
            {"role": "user", "content": build_summary_prompt(idea)},
        ]
        content = await self._complete(messages, max_tokens=self.summary_max_tokens)
        logger.info("Generated summary for %r", idea.business_name)
        return content

    async def analyze_text(self, pitch_text: str) -> PitchAnalysis:
        """Score a pitch transcript across the four delivery dimensions.

        Args:
            pitch_text: The captured pitch transcript.

        Returns:
            The decoded PitchAnalysis. Decoding is strict: any missing, extra
            or mistyped field fails the whole call.

        Raises:
            EmptyPitchTextError: If ``pitch_text`` is blank. No request is sent.
            AnalysisServiceError: On any remote or decoding failure.
        """
        if not pitch_text.strip():
            raise EmptyPitchTextError()

        messages = [
            {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
            {"role": "user", "content": build_analysis_prompt(pitch_text)},
        ]
        content = await self._complete(messages)

        try:
            analysis = PitchAnalysis.model_validate_json(content)
        except ValidationError as exc:
            logger.warning("Rejected analysis response: %d validation errors", exc.error_count())
            raise MalformedResponseError(
                f"Analysis response did not match the report schema: {exc}"
            ) from exc

        logger.info("Pitch analysis complete (overall score %d)", analysis.overall_score)
        return analysis

    async def _complete(self, messages: list[dict[str, str]], max_tokens: int | None = None) -> str:
        request_kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }
        if max_tokens is not None:
            request_kwargs["max_tokens"] = max_tokens

        try:
            response = await self._client.chat.completions.create(**request_kwargs)
        except APIStatusError as exc:
            raise _status_error(exc) from exc
        except APIConnectionError as exc:
            raise NetworkError(f"Failed to reach the analysis service: {exc}") from exc
        except (APIResponseValidationError, ValueError) as exc:
            raise MalformedResponseError(f"Failed to parse OpenAI response: {exc}") from exc

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as exc:
            raise MalformedResponseError(f"Unexpected response shape: {exc}") from exc

        if not isinstance(content, str) or not content.strip():
            raise MalformedResponseError("OpenAI returned an empty response.")
        return content


def _status_error(exc: APIStatusError) -> APIError | AuthenticationError | RateLimitError:
    status_code = exc.status_code
    if status_code == 401:
        logger.error("Authentication failed. API key invalid or missing")
        return AuthenticationError()
    if status_code == 429:
        logger.warning("Rate limited by the analysis service")
        return RateLimitError()
    logger.error("API error - status code %d: %s", status_code, exc.message)
    return APIError(status_code)
