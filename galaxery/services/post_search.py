"""Tag search over posts.

Multi-tag queries are AND queries: a post matches only when it carries every
requested tag. A tag that is not in the vocabulary cannot match anything, so
the search returns an empty page without querying posts at all.
"""
import enum
import logging
import math
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from sqlalchemy import distinct, func, select
from sqlalchemy.orm import Session

from galaxery.core.errors import ValidationFailure, translate_storage_errors
from galaxery.models.post import Post
from galaxery.models.post_tag import PostTag
from galaxery.models.reaction import Favorite, Like
from galaxery.models.user import User
from galaxery.services import tag_store
from galaxery.services.tag_normalizer import normalize_tag_names

logger = logging.getLogger(__name__)

PAGE_SIZE = 12
MAX_PAGE_SIZE = 100


class PostSort(str, enum.Enum):
    """Post ordering"""
    NEWEST = "newest"
    OLDEST = "oldest"
    MOST_LIKED = "most_liked"


@dataclass
class SearchResult:
    posts: List[dict] = field(default_factory=list)
    total_count: int = 0


def total_pages(total_count: int, page_size: int) -> int:
    return max(1, math.ceil(total_count / page_size))


def _like_counts():
    return (
        select(Like.post_id, func.count().label("likes"))
        .group_by(Like.post_id)
        .subquery()
    )


def _posts_with_all_tags(tag_ids: List[int]):
    return (
        select(PostTag.post_id)
        .where(PostTag.tag_id.in_(tag_ids))
        .group_by(PostTag.post_id)
        .having(func.count(distinct(PostTag.tag_id)) == len(tag_ids))
    )


def _order_by(sort: PostSort, like_count):
    if sort == PostSort.OLDEST:
        return (Post.created_at.asc(), Post.id.asc())
    if sort == PostSort.MOST_LIKED:
        return (like_count.desc(), Post.created_at.desc(), Post.id.desc())
    return (Post.created_at.desc(), Post.id.desc())


def _enrich(session: Session, rows) -> List[dict]:
    """Attach tag names to each row with one batched query"""
    rows = list(rows)
    tags = tag_store.tags_for_posts(session, [post.id for post, _, _ in rows])
    return [
        {
            "id": post.id,
            "owner_id": post.user_id,
            "owner_name": owner_name,
            "content_ref": post.content_ref,
            "created_at": post.created_at,
            "like_count": like_count,
            "tag_names": tags[post.id],
        }
        for post, owner_name, like_count in rows
    ]


@translate_storage_errors
def search_posts(
    session: Session,
    tag_names: Optional[Iterable[str]] = None,
    sort: PostSort = PostSort.NEWEST,
    page: int = 1,
    page_size: int = PAGE_SIZE,
    *,
    owner_id: Optional[int] = None,
    favorited_by: Optional[int] = None,
) -> SearchResult:
    """Find posts carrying all of ``tag_names``, sorted and paginated.

    Args:
        session: database session
        tag_names: tag names, the marker is optional; empty matches every post
        sort: ordering of the result
        page: 1-based page number, values below 1 are treated as 1
        page_size: posts per page, capped at MAX_PAGE_SIZE
        owner_id: only posts owned by this user
        favorited_by: only posts this user has favorited

    Returns:
        The requested page and the size of the whole matching set.
    """
    try:
        names = normalize_tag_names(tag_names)
    except ValidationFailure as exc:
        logger.debug("Impossible search term, returning no posts: %s", exc)
        return SearchResult()
    conditions = []
    if names:
        tag_ids = tag_store.lookup_ids(session, names)
        if len(tag_ids) < len(names):
            logger.debug("Unknown tag in search %s, returning no posts", names)
            return SearchResult()
        conditions.append(Post.id.in_(_posts_with_all_tags(tag_ids)))
    if owner_id is not None:
        conditions.append(Post.user_id == owner_id)
    if favorited_by is not None:
        conditions.append(
            Post.id.in_(select(Favorite.post_id).where(Favorite.user_id == favorited_by))
        )

    total_count = session.scalar(
        select(func.count()).select_from(Post).where(*conditions)
    ) or 0
    if total_count == 0:
        return SearchResult()

    page = max(1, page)
    page_size = min(max(1, page_size), MAX_PAGE_SIZE)
    offset = (page - 1) * page_size
    if offset >= total_count:
        return SearchResult(total_count=total_count)

    likes = _like_counts()
    like_count = func.coalesce(likes.c.likes, 0).label("like_count")
    stmt = (
        select(Post, User.username, like_count)
        .outerjoin(User, User.id == Post.user_id)
        .outerjoin(likes, likes.c.post_id == Post.id)
        .where(*conditions)
        .order_by(*_order_by(sort, like_count))
        .offset(offset)
        .limit(page_size)
    )
    return SearchResult(_enrich(session, session.execute(stmt)), total_count)


@translate_storage_errors
def get_post(session: Session, post_id: int) -> Optional[dict]:
    """A single post with owner name, like count and tags"""
    likes = _like_counts()
    stmt = (
        select(Post, User.username, func.coalesce(likes.c.likes, 0))
        .outerjoin(User, User.id == Post.user_id)
        .outerjoin(likes, likes.c.post_id == Post.id)
        .where(Post.id == post_id)
    )
    posts = _enrich(session, session.execute(stmt))
    return posts[0] if posts else None
