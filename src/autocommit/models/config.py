"""Application configuration model."""

from pydantic import BaseModel, Field


class AppConfig(BaseModel):
    """Settings shared by the control surface and the scheduler.

    Field names match the persisted JSON record.
    """

    repo_path: str = Field("", description="Repository to watch and commit")
    auto_commit_enabled: bool = Field(False, description="Whether periodic commits are wanted")
    interval_minutes: int = Field(30, description="Minutes between scheduler ticks")
    auto_start: bool = Field(False, description="Start the scheduler when the app launches")
    gemini_api_key: str = Field("", description="Credential for the Gemini API")

    def masked(self) -> "AppConfig":
        """Return a copy safe to print, with the credential hidden."""
        key = self.gemini_api_key
        hidden = f"{key[:4]}...{key[-2:]}" if len(key) > 8 else ("***" if key else "")
        return self.model_copy(update={"gemini_api_key": hidden})
