"""Tag vocabulary and the post-tag relation.

Usage counts are always aggregated from ``post_tags`` at query time, so the
ranking follows the current relation without a stored counter to keep in sync.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from galaxery.core.errors import ConflictFailure, translate_storage_errors
from galaxery.db.database import dialect_insert
from galaxery.models.post_tag import PostTag
from galaxery.models.tag import TAG_MARKER, Tag

logger = logging.getLogger(__name__)


def _ids_by_name(session: Session, names: Sequence[str]) -> Dict[str, int]:
    rows = session.execute(select(Tag.name, Tag.id).where(Tag.name.in_(names)))
    return {name: tag_id for name, tag_id in rows}


@translate_storage_errors
def resolve_or_create(session: Session, names: Sequence[str]) -> List[int]:
    """Return one tag ID per name, creating vocabulary entries on first sight.

    Runs in the caller's transaction. Missing names are inserted with
    ON CONFLICT DO NOTHING and then re-read, so a concurrent creator of the
    same name never leads to a second row.

    Raises:
        ConflictFailure: a name is still missing after the insert and re-read.
    """
    if not names:
        return []
    known = _ids_by_name(session, names)
    missing = list(dict.fromkeys(n for n in names if n not in known))
    if missing:
        stmt = dialect_insert(session, Tag).values([{"name": n} for n in missing])
        session.execute(stmt.on_conflict_do_nothing(index_elements=["name"]))
        known.update(_ids_by_name(session, missing))
        logger.info("Created tags: %s", ", ".join(missing))

    unresolved = [n for n in names if n not in known]
    if unresolved:
        raise ConflictFailure(f"Could not resolve tags: {', '.join(unresolved)}")
    return [known[n] for n in names]


@translate_storage_errors
def lookup_ids(session: Session, names: Sequence[str]) -> List[int]:
    """Return IDs of the names that exist, in input order; unknown names are left out"""
    if not names:
        return []
    known = _ids_by_name(session, names)
    return [known[n] for n in names if n in known]


def _ranked_tags(prefix: Optional[str], limit: int):
    usage = func.count(PostTag.post_id).label("usage_count")
    stmt = (
        select(Tag.name, usage)
        .outerjoin(PostTag, PostTag.tag_id == Tag.id)
        .group_by(Tag.id, Tag.name)
        .order_by(usage.desc(), Tag.id.asc())
        .limit(limit)
    )
    if prefix:
        stmt = stmt.where(Tag.name.startswith(prefix, autoescape=True))
    return stmt


@translate_storage_errors
def prefix_search(session: Session, prefix: str, limit: int) -> List[dict]:
    """Tags whose name starts with ``prefix``, most used first.

    The marker is added to the prefix when missing, so ``"ca"`` and ``"#ca"``
    give the same result.
    """
    if limit <= 0:
        return []
    prefix = prefix.lower()
    if not prefix.startswith(TAG_MARKER):
        prefix = TAG_MARKER + prefix
    rows = session.execute(_ranked_tags(prefix, limit))
    return [{"name": name, "count": count} for name, count in rows]


@translate_storage_errors
def popular(session: Session, limit: int) -> List[dict]:
    """Most used tags over the whole vocabulary"""
    if limit <= 0:
        return []
    rows = session.execute(_ranked_tags(None, limit))
    return [{"name": name, "count": count} for name, count in rows]


@translate_storage_errors
def get_tag(session: Session, name: str) -> Optional[dict]:
    """A single vocabulary entry with its current usage count"""
    tag = session.execute(select(Tag).where(Tag.name == name)).scalar_one_or_none()
    if tag is None:
        return None
    usage_count = session.scalar(
        select(func.count(PostTag.id)).where(PostTag.tag_id == tag.id)
    )
    return {
        "id": tag.id,
        "name": tag.name,
        "created_at": tag.created_at,
        "usage_count": usage_count or 0,
    }


@translate_storage_errors
def tags_for_posts(session: Session, post_ids: Iterable[int]) -> Dict[int, List[str]]:
    """Tag names of many posts in one query, in the order they were attached"""
    post_ids = list(post_ids)
    tags = {post_id: [] for post_id in post_ids}
    if not post_ids:
        return tags
    rows = session.execute(
        select(PostTag.post_id, Tag.name)
        .join(Tag, Tag.id == PostTag.tag_id)
        .where(PostTag.post_id.in_(post_ids))
        .order_by(PostTag.post_id, PostTag.id)
    )
    for post_id, name in rows:
        tags[post_id].append(name)
    return tags
