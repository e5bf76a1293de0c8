import logging
from typing import List, Sequence

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from galaxery.core.errors import NotFoundFailure, translate_storage_errors
from galaxery.db.database import dialect_insert
from galaxery.models.post import Post
from galaxery.models.post_tag import PostTag
from galaxery.services import tag_store

logger = logging.getLogger(__name__)


@translate_storage_errors
def set_tags(session: Session, post_id: int, canonical_tag_names: Sequence[str]) -> List[str]:
    """Replace the whole tag set of a post.

    The delete and the inserts run in the caller's transaction and become
    visible together when the caller commits; readers never see a mix of the
    old and new sets. An empty list clears the tags.

    Raises:
        NotFoundFailure: the post does not exist.
    """
    if session.scalar(select(Post.id).where(Post.id == post_id)) is None:
        raise NotFoundFailure(f"Post {post_id} not found")

    names = list(dict.fromkeys(canonical_tag_names))
    tag_ids = tag_store.resolve_or_create(session, names)

    session.execute(delete(PostTag).where(PostTag.post_id == post_id))
    if tag_ids:
        stmt = dialect_insert(session, PostTag).values(
            [{"post_id": post_id, "tag_id": tag_id} for tag_id in tag_ids]
        )
        session.execute(stmt.on_conflict_do_nothing(index_elements=["post_id", "tag_id"]))
    session.flush()

    logger.info("Post %s tags set to [%s]", post_id, ", ".join(names))
    return names
