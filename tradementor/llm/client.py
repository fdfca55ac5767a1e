"""Async Anthropic Claude client wrapper with retry logic."""

from typing import Any

import anthropic
from anthropic import AsyncAnthropic
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from tradementor.config import Settings, get_settings
from tradementor.core.exceptions import ConfigurationError, LLMError

TRANSIENT_ERRORS = (
    anthropic.APIConnectionError,
    anthropic.RateLimitError,
    anthropic.InternalServerError,
)


class ClaudeClient:
    """Async wrapper for Anthropic Claude API with retry logic.

    Constructed by the caller and passed to the services that need it; it
    returns raw completion text and leaves parsing to the recovery pipeline.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: Any | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        if client is None and not self._settings.is_configured:
            raise ConfigurationError("ANTHROPIC_API_KEY not configured")
        self._client = client or AsyncAnthropic(api_key=self._settings.anthropic_api_key)
        self._model = self._settings.model

    @property
    def model(self) -> str:
        """Get the current model name."""
        return self._model

    def _log_retry(self, state: RetryCallState) -> None:
        error = state.outcome.exception() if state.outcome else None
        logger.warning(
            "Claude call failed (attempt {}/{}): {}",
            state.attempt_number,
            self._settings.api_retry_attempts,
            error,
        )

    async def complete_text(
        self,
        system_prompt: str,
        user_prompt: str,
        max_tokens: int | None = None,
        temperature: float | None = None,
    ) -> str:
        """
        Send a completion request and return the raw text response.

        Transient failures (connection, rate limit, 5xx) are retried with
        exponential backoff; anything left over is raised as LLMError.

        Args:
            system_prompt: The system prompt
            user_prompt: The user message
            max_tokens: Maximum tokens in response (settings default)
            temperature: Sampling temperature (settings default)

        Returns:
            Raw text response
        """
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self._settings.api_retry_attempts),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                retry=retry_if_exception_type(TRANSIENT_ERRORS),
                before_sleep=self._log_retry,
                reraise=True,
            ):
                with attempt:
                    response = await self._client.messages.create(
                        model=self._model,
                        max_tokens=max_tokens or self._settings.max_tokens,
                        temperature=(
                            self._settings.temperature if temperature is None else temperature
                        ),
                        system=system_prompt,
                        messages=[{"role": "user", "content": user_prompt}],
                    )

        except anthropic.APIStatusError as e:
            raise LLMError(
                f"Claude API error: {e}",
                model=self._model,
                status_code=e.status_code,
            ) from e
        except Exception as e:
            raise LLMError(
                f"Claude API error: {e}",
                model=self._model,
            ) from e

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        logger.debug("Claude returned {} characters", len(text))
        return text

    async def health_check(self) -> bool:
        """Check API connectivity."""
        try:
            response = await self._client.messages.create(
                model=self._model,
                max_tokens=10,
                messages=[{"role": "user", "content": "Say 'ok'"}],
            )
            return len(response.content) > 0
        except Exception:
            return False
