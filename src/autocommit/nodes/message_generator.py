"""Commit message generation using the Gemini generateContent API."""

from typing import Optional

import httpx
from loguru import logger
from pydantic import ValidationError

from autocommit.errors import ApiError, NetworkError, NoCandidateError, ParseError
from autocommit.models.gemini import GenerateContentRequest, GenerateContentResponse
from autocommit.models.state import DiffSummary
from autocommit.settings import Settings

SYSTEM_INSTRUCTION = """You are an expert Git commit message generator specialized in creating professional, concise, and meaningful commit messages following industry best practices.

CONTEXT AND PURPOSE:
- You analyze git diffs to understand code changes
- You generate commit messages following the Conventional Commits specification
- Your primary function is to create clear, actionable commit messages that help developers understand changes at a glance

COMMIT MESSAGE RULES:
1. Format: <type>(<scope>): <subject>
2. Types: feat, fix, docs, style, refactor, test, chore, perf
3. Subject: Imperative mood, lowercase, no period, max 50 characters
4. Be specific and descriptive
5. Focus on WHAT and WHY, not HOW

EXAMPLES:
- feat(auth): add JWT token validation
- fix(api): resolve null pointer in user endpoint
- refactor(database): optimize query performance
- docs(readme): update installation instructions
- style(components): format code with prettier

ANALYSIS APPROACH:
1. Identify modified files and their purpose
2. Determine the type of change (feature, bug fix, etc.)
3. Extract the main impact or goal
4. Formulate a clear, concise message

Always respond with ONLY the commit message, no explanations or additional text."""

USER_PROMPT_PREFIX = "Analyze these git changes and generate a commit message:"


class GeminiClient:
    """Thin async HTTP client for generateContent.

    A new ``httpx.AsyncClient`` is opened per request so the client can be
    shared between the scheduler and manual runs without lifecycle handling.
    """

    def __init__(self, settings: Optional[Settings] = None, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.settings = settings or Settings()
        self._transport = transport

    async def post(self, request: GenerateContentRequest, api_key: str) -> httpx.Response:
        """Send the request and return the raw response, whatever its status.

        Raises:
            httpx.HTTPError: When the service cannot be reached.
        """
        timeout = httpx.Timeout(self.settings.http_timeout, connect=10.0)
        async with httpx.AsyncClient(timeout=timeout, transport=self._transport) as client:
            return await client.post(
                self.settings.generate_url,
                json=request.to_payload(),
                headers={"x-goog-api-key": api_key},
            )


def build_prompt(summary: DiffSummary) -> str:
    return f"{USER_PROMPT_PREFIX}\n\n{summary.text}"


def parse_response(response: httpx.Response) -> str:
    """Extract the first candidate's first text part from a successful response."""
    try:
        decoded = GenerateContentResponse.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        raise ParseError(f"Failed to parse response: {e}") from e

    text = decoded.first_text()
    if not text or not text.strip():
        raise NoCandidateError("No commit message generated")
    return text


class MessageGenerator:
    """Asks the model for a commit message describing a diff summary."""

    def __init__(self, client: Optional[GeminiClient] = None):
        self.client = client or GeminiClient()

    async def generate(self, summary: DiffSummary, api_key: str) -> str:
        """Return the generated message verbatim; cleanup is the caller's job."""
        request = GenerateContentRequest.single_turn(SYSTEM_INSTRUCTION, build_prompt(summary))
        logger.debug(f"Requesting commit message for {len(summary.text)} characters of diff")

        try:
            response = await self.client.post(request, api_key)
        except httpx.HTTPError as e:
            logger.error(f"Gemini request failed: {e}")
            raise NetworkError(f"Network error: {e}") from e

        if not response.is_success:
            logger.error(f"Gemini API error: {response.status_code}")
            raise ApiError(
                f"Gemini API error: {response.text}",
                status_code=response.status_code,
                body=response.text,
            )

        return parse_response(response)
