"""LLM Client for Groq API integration."""
import math
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence
from groq import Groq
from groq import RateLimitError, AuthenticationError, APIError, APITimeoutError
from tenacity import Retrying, RetryCallState, retry_if_exception_type, stop_after_attempt
import logging

from models.conversation import Message
from config import (
    GROQ_API_KEY,
    CHAT_MODEL,
    MAX_OUTPUT_TOKENS,
    MAX_RETRIES,
    MAX_RETRY_WAIT_SECONDS,
    DEFAULT_RETRY_AFTER_SECONDS,
)

logger = logging.getLogger(__name__)

SYSTEM_PROMPT_TEMPLATE = """Jsi užitečný AI asistent, který odpovídá na otázky o nahraném PDF dokumentu (návodu). Odpovídej vždy v češtině. Buď přesný a stručný. Pokud odpověď není v nalezených částech dokumentu, řekni to.

Relevantní části dokumentu:
{context}"""


@dataclass
class LLMResponse:
    """Response from LLM generation."""
    text: str
    tokens_input: int
    tokens_output: int
    latency_ms: int
    model_used: str
    attempts: int = 1


@dataclass
class LLMError:
    """Structured error response from LLM operations."""
    code: str
    message: str
    details: Dict[str, Any]


class LLMClientError(Exception):
    """Custom exception for LLM client errors with structured error information."""

    RATE_LIMITED = "RATE_LIMITED"
    UPSTREAM_FAILURE = "UPSTREAM_FAILURE"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"

    def __init__(self, error: LLMError):
        self.error = error
        super().__init__(error.message)


class LLMClient:
    """Client for interfacing with Groq API for chat completions."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = CHAT_MODEL,
        max_tokens: int = MAX_OUTPUT_TOKENS,
        max_retries: int = MAX_RETRIES,
        max_retry_wait: float = MAX_RETRY_WAIT_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize LLM client with Groq API key.

        Args:
            api_key: Groq API key (defaults to GROQ_API_KEY from environment)
            model: Chat model name
            max_tokens: Maximum tokens to generate
            max_retries: Retries after a rate-limited attempt
            max_retry_wait: Upper bound in seconds for one backoff sleep
            sleep: Function used to wait between retries
        """
        self.api_key = api_key or GROQ_API_KEY
        if not self.api_key:
            raise ValueError("GROQ_API_KEY must be provided or set in environment")

        self.model = model
        self.max_tokens = max_tokens
        self.max_retries = max_retries
        self.max_retry_wait = max_retry_wait
        self.sleep = sleep
        # SDK-level retries disabled; generate() owns the retry policy
        self.client = Groq(api_key=self.api_key, max_retries=0)
        logger.info("LLMClient initialized successfully")

    def generate(
        self,
        system_prompt: str,
        history: Sequence[Message],
        question: str,
    ) -> LLMResponse:
        """
        Generate an answer, retrying when the API signals rate limiting.

        Args:
            system_prompt: System instruction including the document context
            history: Earlier conversation turns, oldest first
            question: New user question

        Returns:
            LLMResponse with text, token counts, and latency

        Raises:
            LLMClientError: RATE_LIMITED once retries are exhausted, or a
                non-retryable error code on the first other failure
        """
        messages = self.build_messages(system_prompt, history, question)
        start_time = time.time()

        try:
            for attempt in Retrying(
                stop=stop_after_attempt(self.max_retries + 1),
                retry=retry_if_exception_type(RateLimitError),
                wait=self._wait_for_retry,
                sleep=self.sleep,
                before_sleep=self._log_retry,
                reraise=True,
            ):
                with attempt:
                    response = self._create(messages, start_time, attempt.retry_state.attempt_number)
            return response
        except RateLimitError as e:
            raise self._error(
                LLMClientError.RATE_LIMITED,
                "Rate limit exceeded. Please try again in a few moments.",
                e, start_time,
                attempts=self.max_retries + 1,
                retry_after=self._retry_wait(e),
            )
        except AuthenticationError as e:
            raise self._error(
                LLMClientError.AUTHENTICATION_ERROR,
                "Authentication failed. Please check your API key.",
                e, start_time,
            )
        except APITimeoutError as e:
            raise self._error(
                LLMClientError.TIMEOUT_ERROR,
                "Request timed out. Please try again.",
                e, start_time,
            )
        except APIError as e:
            raise self._error(
                LLMClientError.UPSTREAM_FAILURE,
                f"Groq API error: {str(e)}",
                e, start_time,
            )

    def _wait_for_retry(self, retry_state: RetryCallState) -> float:
        return self._retry_wait(retry_state.outcome.exception())

    def _log_retry(self, retry_state: RetryCallState) -> None:
        wait_seconds = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.warning(
            f"Rate limited by Groq (attempt {retry_state.attempt_number}/{self.max_retries + 1}), "
            f"retrying in {wait_seconds:.0f}s"
        )

    def _create(self, messages: List[Dict[str, str]], start_time: float, attempts: int) -> LLMResponse:
        logger.debug(f"Generating response with model: {self.model}")

        response = self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            max_tokens=self.max_tokens,
        )

        latency_ms = int((time.time() - start_time) * 1000)
        text = response.choices[0].message.content
        tokens_input = response.usage.prompt_tokens
        tokens_output = response.usage.completion_tokens

        logger.info(
            f"Generated response: model={self.model}, "
            f"input_tokens={tokens_input}, output_tokens={tokens_output}, "
            f"latency={latency_ms}ms, attempts={attempts}"
        )

        return LLMResponse(
            text=text,
            tokens_input=tokens_input,
            tokens_output=tokens_output,
            latency_ms=latency_ms,
            model_used=self.model,
            attempts=attempts,
        )

    def _retry_wait(self, error: RateLimitError) -> float:
        """Seconds to wait from the retry-after header, capped at max_retry_wait."""
        retry_after = error.response.headers.get("retry-after")
        try:
            seconds = float(retry_after)
        except (TypeError, ValueError):
            seconds = DEFAULT_RETRY_AFTER_SECONDS
        if not math.isfinite(seconds):
            seconds = DEFAULT_RETRY_AFTER_SECONDS
        return min(max(seconds, 0.0), self.max_retry_wait)

    def _error(self, code: str, message: str, original: Exception, start_time: float, **details) -> LLMClientError:
        latency_ms = int((time.time() - start_time) * 1000)
        error = LLMError(
            code=code,
            message=message,
            details={
                "model": self.model,
                "latency_ms": latency_ms,
                "original_error": str(original),
                **details,
            }
        )
        logger.error(
            f"{code}: model={self.model}, latency={latency_ms}ms, error={original}",
            extra={"error_code": error.code, "error_details": error.details}
        )
        return LLMClientError(error)

    @staticmethod
    def build_system_prompt(context: str) -> str:
        """
        Build the system instruction around the assembled document context.

        Args:
            context: Relevant document chunks joined into one string

        Returns:
            System prompt string
        """
        return SYSTEM_PROMPT_TEMPLATE.format(context=context)

    @staticmethod
    def build_messages(system_prompt: str, history: Sequence[Message], question: str) -> List[Dict[str, str]]:
        """System message, then history in order, then the new question."""
        messages = [{"role": "system", "content": system_prompt}]
        messages.extend(message.to_dict() for message in history)
        messages.append({"role": "user", "content": question})
        return messages
