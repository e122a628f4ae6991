import logging
import requests
from typing import Optional, Protocol

from config import InterviewConfig
from utilities.constants import SYSTEM_PROMPT
from utilities.errors import ApiError, InvalidResponse, TransportError

logger = logging.getLogger(__name__)


class CompletionClient(Protocol):
    """Anything that can turn a prompt into completion text."""

    def complete(self, prompt: str) -> str:
        ...


def _build_request(config: InterviewConfig, prompt: str):
    """Build request headers and JSON payload for the chat-completion endpoint.

    The payload matches the structure expected by OpenAI-style APIs:
    {
      "model": ..., "temperature": ..., "max_tokens": ...,
      "messages": [ {"role": "system", ...}, {"role": "user", "content": <prompt>} ]
    }

    Keeping this centralized ensures the structure stays in sync with
    `_extract_text()` which parses the corresponding response shape.

    Args:
        config: Connection and sampling settings.
        prompt: The user prompt to send to the model.

    Returns:
        A tuple of (headers, data) ready to pass to requests.post.
    """
    headers = {
        'Content-Type': 'application/json',
        'Authorization': f'Bearer {config.api_key}',
    }
    data = {
        'model': config.model,
        'messages': [
            {'role': 'system', 'content': SYSTEM_PROMPT},
            {'role': 'user', 'content': prompt},
        ],
        'temperature': config.temperature,
        'max_tokens': config.max_tokens,
    }
    return headers, data


def _extract_text(response_json) -> Optional[str]:
    """Extract the message content from a chat-completion response.

    Expected shape (minimal):
    {
      "choices": [ { "message": { "content": "..." } } ]
    }

    Returns None if any of the expected keys/arrays are missing or the
    content is not a string. The text is returned untouched; callers decide
    how to trim or split it.
    """
    if not isinstance(response_json, dict):
        return None
    choices = response_json.get('choices') or []
    if not choices or not isinstance(choices[0], dict):
        return None
    message = choices[0].get('message') or {}
    content = message.get('content') if isinstance(message, dict) else None
    return content if isinstance(content, str) else None


def _extract_error_message(resp) -> str:
    """Pull `error.message` out of a failed response, else fall back to the status."""
    try:
        payload = resp.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict):
        error = payload.get('error')
        if isinstance(error, dict) and isinstance(error.get('message'), str):
            return error['message']
    return f"HTTP {resp.status_code}"


class OpenAICompletionClient:
    """Single-shot client for an OpenAI-compatible `/chat/completions` endpoint.

    Behavior:
    - One POST per `complete()` call. No retries, no backoff, no caching.
    - Network errors (RequestException) raise TransportError.
    - Non-200 responses raise ApiError with the payload's error message.
    - 200 responses that cannot be parsed raise InvalidResponse.
    """

    def __init__(self, config: InterviewConfig, session=None):
        self.config = config
        self.url = f"{config.base_url.rstrip('/')}/chat/completions"
        self.http = session or requests
        logger.info(
            "Completion client ready: %s (model=%s, key=%s..., vector db=%s)",
            self.url, config.model, config.api_key[:5], config.vector_database_id,
        )

    def complete(self, prompt: str) -> str:
        headers, data = _build_request(self.config, prompt)
        try:
            resp = self.http.post(self.url, headers=headers, json=data, timeout=self.config.timeout)
        except requests.RequestException as e:
            logger.error("Completion request failed: %s", e)
            raise TransportError(f"Request failed: {e}") from e

        logger.debug("Completion response status: %s", resp.status_code)
        if resp.status_code != 200:
            message = _extract_error_message(resp)
            logger.error("Completion API error: %s", message)
            raise ApiError(message)

        try:
            payload = resp.json()
        except ValueError as e:
            raise InvalidResponse(f"Response was not JSON: {resp.text[:200]}") from e

        text = _extract_text(payload)
        if text is None:
            raise InvalidResponse(f"Unexpected API response format: {resp.text[:200]}")
        return text
