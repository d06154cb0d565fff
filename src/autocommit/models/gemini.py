"""Wire models for the Gemini generateContent endpoint."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Part(BaseModel):
    """A single text part of a turn."""

    text: Optional[str] = None


class Content(BaseModel):
    """One turn (or the system instruction) made of text parts."""

    parts: List[Part] = Field(default_factory=list)


class GenerateContentRequest(BaseModel):
    """Request body: a system instruction plus the conversation turns."""

    model_config = ConfigDict(populate_by_name=True)

    system_instruction: Content = Field(..., alias="systemInstruction")
    contents: List[Content]

    @classmethod
    def single_turn(cls, system_text: str, user_text: str) -> "GenerateContentRequest":
        return cls(
            system_instruction=Content(parts=[Part(text=system_text)]),
            contents=[Content(parts=[Part(text=user_text)])],
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class Candidate(BaseModel):
    """One generated alternative."""

    content: Optional[Content] = None


class GenerateContentResponse(BaseModel):
    """Response body. Blocked or empty generations omit candidates entirely."""

    candidates: List[Candidate] = Field(default_factory=list)

    def first_text(self) -> Optional[str]:
        """Text of the first part of the first candidate, if there is one."""
        if not self.candidates:
            return None
        content = self.candidates[0].content
        if content is None or not content.parts:
            return None
        return content.parts[0].text
