"""Standalone credential check against the Gemini API."""

from typing import Optional

import httpx
from loguru import logger

from autocommit.errors import ApiError, NetworkError
from autocommit.models.gemini import GenerateContentRequest
from autocommit.nodes.message_generator import GeminiClient

VALIDATION_SYSTEM_TEXT = "You are a helpful assistant."
VALIDATION_PROMPT = "Say 'API Key is valid' if you can read this."
VALID_KEY_MESSAGE = "API Key is valid!"


class ApiKeyValidator:
    """Checks a caller supplied key. Any 2xx answer counts as valid."""

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    async def validate(self, api_key: str) -> str:
        request = GenerateContentRequest.single_turn(VALIDATION_SYSTEM_TEXT, VALIDATION_PROMPT)
        try:
            response = await self.client.post(request, api_key)
        except httpx.HTTPError as e:
            raise NetworkError(f"Connection error: {e}") from e

        if response.is_success:
            logger.info("API key accepted")
            return VALID_KEY_MESSAGE

        logger.warning(f"API key rejected with status {response.status_code}")
        raise ApiError(f"Invalid API Key: {response.text}", status_code=response.status_code, body=response.text)
