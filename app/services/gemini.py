"""Shared Google Gemini client (google-genai SDK)."""
import logging
from functools import lru_cache

from google import genai

from app.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_gemini_client() -> genai.Client:
    """
    Create (or reuse) the Gemini client.

    Raises:
        ValueError: If no API key is configured
    """
    settings = get_settings()
    if not settings.gemini_api_key:
        logger.error("RESUMEMATCH_GEMINI_API_KEY not configured")
        raise ValueError("Gemini API key not configured")
    return genai.Client(api_key=settings.gemini_api_key)
