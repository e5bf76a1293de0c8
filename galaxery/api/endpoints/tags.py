from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session
from galaxery.core.errors import ValidationFailure
from galaxery.db.database import get_session
from galaxery.schemas.tag import TagResponse, TagSuggestion
from galaxery.services import autocomplete, tag_store
from galaxery.services.tag_normalizer import canonical_tag

POPULAR_LIMIT = 40

router = APIRouter()

def tag_name_or_404(name: str) -> str:
    """Canonical form of a tag name taken from the path"""
    try:
        return canonical_tag(name)
    except ValidationFailure:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag not found"
        )

@router.get("/autocomplete", response_model=List[TagSuggestion], summary="Suggest tags for a typed prefix")
def autocomplete_tags(
    q: str = Query("", description="Text typed so far, with or without #"),
    session: Session = Depends(get_session)
):
    """Suggest tags starting with the word being typed, most used first"""
    return autocomplete.suggest(session, q)

@router.get("/popular", response_model=List[TagSuggestion], summary="List the most used tags")
def popular_tags(
    limit: int = Query(POPULAR_LIMIT, ge=1, le=100),
    session: Session = Depends(get_session)
):
    """List the most used tags"""
    return tag_store.popular(session, limit)

@router.get("/{name}", response_model=TagResponse, summary="Get a specific tag")
def get_tag(
    name: str,
    session: Session = Depends(get_session)
):
    """Get a specific tag, the leading # is optional"""
    tag = tag_store.get_tag(session, tag_name_or_404(name))
    if not tag:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Tag not found"
        )
    return tag

@router.get("/{name}/posts", summary="Browse the posts of a tag")
def tag_posts(name: str, request: Request):
    """Redirect to the post search for a single tag"""
    url = request.url_for("search_posts").include_query_params(tags=tag_name_or_404(name))
    return RedirectResponse(url=str(url), status_code=status.HTTP_307_TEMPORARY_REDIRECT)
