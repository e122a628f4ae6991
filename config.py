import os
from dataclasses import dataclass
from dotenv import load_dotenv

from utilities.errors import MissingConfiguration

load_dotenv()

OPENAI_BASE_URL = os.getenv('OPENAI_BASE_URL', 'https://api.openai.com/v1')
REDIS_URL = os.getenv('REDIS_URL', 'redis://localhost:6379')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')


@dataclass(frozen=True)
class InterviewConfig:
    """Settings handed to the completion client at construction time."""
    api_key: str
    vector_database_id: str
    base_url: str = OPENAI_BASE_URL
    model: str = 'gpt-4-turbo-preview'
    temperature: float = 0.7
    max_tokens: int = 1000
    timeout: int = 120


def _require(key: str) -> str:
    value = (os.getenv(key) or '').strip()
    if not value:
        raise MissingConfiguration(key)
    return value


def load_config() -> InterviewConfig:
    """Read the completion settings from the environment.

    OPENAI_API_KEY and VECTOR_DATABASE_ID are required; everything else
    falls back to the dataclass defaults.
    """
    return InterviewConfig(
        api_key=_require('OPENAI_API_KEY'),
        vector_database_id=_require('VECTOR_DATABASE_ID'),
        base_url=os.getenv('OPENAI_BASE_URL', OPENAI_BASE_URL),
        model=os.getenv('OPENAI_MODEL', 'gpt-4-turbo-preview'),
        temperature=float(os.getenv('OPENAI_TEMPERATURE', '0.7')),
        max_tokens=int(os.getenv('OPENAI_MAX_TOKENS', '1000')),
        timeout=int(os.getenv('OPENAI_TIMEOUT', '120')),
    )
