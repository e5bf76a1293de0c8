"""Turn raw user text into canonical tag names.

A canonical tag is lowercase, starts with exactly one ``#`` and contains no
whitespace or commas. Two entry points exist on purpose:

* the search box accepts bare words (``cat dog`` searches ``#cat`` and ``#dog``)
* the upload tag field only keeps tokens typed with the marker (``#cat dog``
  tags the post with ``#cat`` alone)
"""
import logging
import re
from typing import Iterable, List, Optional

from galaxery.core.errors import ValidationFailure
from galaxery.models.tag import MAX_TAG_LENGTH, TAG_MARKER

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r"[\s,]+")
_LEADING_MARKERS = re.compile(r"^" + re.escape(TAG_MARKER) + r"+")


def canonical_tag(token: str) -> str:
    """Canonicalize a single token, adding the marker if it is missing.

    Raises:
        ValidationFailure: the token is empty, only markers, or too long.
    """
    body = _LEADING_MARKERS.sub("", token.strip()).lower()
    if not body:
        raise ValidationFailure(f"Empty tag: {token!r}")
    if _SEPARATORS.search(body):
        raise ValidationFailure(f"Tag contains a separator: {token!r}")
    name = TAG_MARKER + body
    if len(name) > MAX_TAG_LENGTH:
        raise ValidationFailure(f"Tag longer than {MAX_TAG_LENGTH} characters: {token!r}")
    return name


def _is_blank(token: str) -> bool:
    return not _LEADING_MARKERS.sub("", token.strip())


def _collect(tokens: Iterable[str], strict: bool = False) -> List[str]:
    """Canonicalize and deduplicate ``tokens``.

    Blank and marker-only tokens are always skipped. Any other invalid token
    is skipped too, unless ``strict`` is set, in which case its
    ValidationFailure propagates.
    """
    seen = set()
    tags = []
    for token in tokens:
        if _is_blank(token):
            continue
        try:
            name = canonical_tag(token)
        except ValidationFailure as exc:
            if strict:
                raise
            logger.debug("Discarding tag token: %s", exc)
            continue
        if name not in seen:
            seen.add(name)
            tags.append(name)
    return tags


def split_tokens(text: Optional[str]) -> List[str]:
    """Split raw input on whitespace and commas"""
    if not text:
        return []
    return [t for t in _SEPARATORS.split(text) if t]


def parse_search_tags(text: Optional[str]) -> List[str]:
    """Parse search input, every token is a tag.

    Raises:
        ValidationFailure: a token can never be a tag name (too long), so the
            search cannot match anything.
    """
    return _collect(split_tokens(text), strict=True)


def parse_tag_field(text: Optional[str]) -> List[str]:
    """Parse an upload/edit tag field, only marker-prefixed tokens are tags"""
    return _collect(t for t in split_tokens(text) if t.startswith(TAG_MARKER))


def normalize_tag_names(names: Optional[Iterable[str]]) -> List[str]:
    """Canonicalize and deduplicate an already split sequence of search names.

    Raises:
        ValidationFailure: a name can never exist in the vocabulary.
    """
    if not names:
        return []
    return _collect(names, strict=True)
