from pydantic import BaseModel


class SuggestionRequest(BaseModel):
    prompt: str | None = None


class SuggestionOut(BaseModel):
    suggestion: str
