from fastapi import APIRouter, Depends, HTTPException

from hobby_planner.schemas.suggestions import SuggestionOut, SuggestionRequest
from hobby_planner.services.suggestions import (
    SuggestionClient,
    SuggestionError,
    get_suggestion_client,
)

router = APIRouter(prefix="/api", tags=["suggestions"])


@router.post("/suggest-session", response_model=SuggestionOut)
def suggest_session(
    payload: SuggestionRequest | None = None,
    client: SuggestionClient = Depends(get_suggestion_client),
):
    """Ask the text-generation API for a session idea."""
    try:
        suggestion = client.suggest(payload.prompt if payload else None)
    except SuggestionError:
        raise HTTPException(status_code=500, detail="Failed to generate suggestion")
    return {"suggestion": suggestion}
