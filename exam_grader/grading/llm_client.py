"""
LLM Client for the grading oracle.

Provides a wrapper around the OpenAI SDK pointed at an OpenAI-compatible
completions endpoint (Together AI by default). Each call is a single
attempt bounded by a timeout; a failed call is reported, never retried.
"""

import logging

from openai import APIConnectionError, APIStatusError, APITimeoutError, OpenAI

from exam_grader.config import Settings, get_settings

logger = logging.getLogger(__name__)


class LLMError(Exception):
    """Raised when the LLM API call fails."""

    def __init__(self, message: str, cause: Exception | None = None):
        self.cause = cause
        super().__init__(message)


class LLMClient:
    """
    Client for the grading oracle's completions endpoint.

    Uses the OpenAI SDK with a custom base URL. SDK-level retries are
    disabled so that one failed request hands control straight back to the
    caller.
    """

    def __init__(self, settings: Settings | None = None):
        """
        Initialize the LLM client.

        Args:
            settings: Configuration settings. Uses global settings if not provided.
        """
        self._settings = settings or get_settings()
        self._client = OpenAI(
            api_key=self._settings.together_api_key,
            base_url=self._settings.together_base_url,
            timeout=self._settings.grading_timeout_seconds,
            max_retries=0,
        )

    @property
    def model(self) -> str:
        return self._settings.together_model

    def complete(self, prompt: str) -> str:
        """
        Generate a completion for a grading prompt.

        Args:
            prompt: Fully rendered grading prompt.

        Returns:
            The generated text, stripped of surrounding whitespace.

        Raises:
            LLMError: If the request fails or the reply carries no text.
        """
        try:
            response = self._client.completions.create(
                model=self._settings.together_model,
                prompt=prompt,
                max_tokens=self._settings.llm_max_tokens,
                temperature=self._settings.llm_temperature,
                stop=[self._settings.llm_stop_sequence],
            )
        except APITimeoutError as e:
            raise LLMError(
                f"Request timed out after {self._settings.grading_timeout_seconds}s", cause=e
            ) from e
        except APIConnectionError as e:
            raise LLMError("Connection to grading service failed", cause=e) from e
        except APIStatusError as e:
            raise LLMError(f"API error ({e.status_code}): {e.message}", cause=e) from e
        except Exception as e:
            raise LLMError(f"Unexpected error: {e}", cause=e) from e

        text = self._extract_text(response)
        if not text:
            raise LLMError("Empty response from model")
        return text

    @staticmethod
    def _extract_text(response: object) -> str:
        """Pull ``choices[0].text`` out of a reply, tolerating missing pieces."""
        choices = getattr(response, "choices", None)
        if not choices:
            return ""
        text = getattr(choices[0], "text", None)
        if not isinstance(text, str):
            return ""
        return text.strip()

    def health_check(self) -> bool:
        """
        Check if the API is reachable.

        Returns:
            True if API is healthy, False otherwise.
        """
        try:
            response = self._client.completions.create(
                model=self._settings.together_model,
                prompt="ping",
                max_tokens=5,
            )
            return bool(response.choices)
        except Exception:
            logger.debug("Health check failed", exc_info=True)
            return False
