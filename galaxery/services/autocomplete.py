"""Tag suggestions while the user types.

Read-only and cheap enough to be called on every keystroke.
"""
from typing import List

from sqlalchemy.orm import Session

from galaxery.models.tag import TAG_MARKER
from galaxery.services import tag_store

SUGGESTION_LIMIT = 10


def current_prefix(raw_text: str) -> str:
    """The bare prefix of the token being typed: last word, markers stripped, lowercased"""
    tokens = (raw_text or "").split()
    if not tokens:
        return ""
    return tokens[-1].lstrip(TAG_MARKER).lower()


def suggest(session: Session, raw_text: str) -> List[dict]:
    prefix = current_prefix(raw_text)
    if not prefix:
        return []
    return tag_store.prefix_search(session, prefix, SUGGESTION_LIMIT)
