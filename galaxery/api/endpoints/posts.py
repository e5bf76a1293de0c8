from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import delete
from sqlalchemy.orm import Session
from galaxery.core.errors import ValidationFailure
from galaxery.db.database import get_session
from galaxery.models.post import Post
from galaxery.models.post_tag import PostTag
from galaxery.models.reaction import Favorite, Like
from galaxery.models.user import User
from galaxery.schemas.post import PostCreate, PostUpdate, PostResponse, PostPage
from galaxery.core.security import get_current_user, get_optional_current_user
from galaxery.services import post_search
from galaxery.services.post_search import PAGE_SIZE, MAX_PAGE_SIZE, PostSort
from galaxery.services.tag_attachment import set_tags
from galaxery.services.tag_normalizer import parse_search_tags, parse_tag_field, split_tokens

router = APIRouter()

def get_own_post(session: Session, post_id: int, current_user: User) -> Post:
    """Get a post the current user owns"""
    post = session.get(Post, post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    if post.user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions"
        )
    return post

def page_response(result: post_search.SearchResult, page: int, page_size: int, sort: PostSort, tags=None) -> dict:
    return {
        "posts": result.posts,
        "total_count": result.total_count,
        "page": max(1, page),
        "page_size": page_size,
        "total_pages": post_search.total_pages(result.total_count, page_size),
        "sort": sort,
        "tags": tags or [],
    }

@router.get("", response_model=PostPage, summary="Search posts by tags")
def search_posts(
    tags: str = Query("", description="Comma separated tag names, # is optional"),
    sort: PostSort = PostSort.NEWEST,
    page: int = 1,
    page_size: int = Query(PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    session: Session = Depends(get_session)
):
    """Search posts carrying all the given tags, or every post when no tag is given"""
    try:
        tag_names = parse_search_tags(tags)
    except ValidationFailure:
        # a term that can never be a tag name matches no post
        return page_response(post_search.SearchResult(), page, page_size, sort, split_tokens(tags))
    result = post_search.search_posts(session, tag_names, sort, page, page_size)
    return page_response(result, page, page_size, sort, tag_names)

@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED, summary="Create a new post")
def create_post(
    post: PostCreate,
    current_user: User = Depends(get_current_user),
    session: Session = Depends(get_session)
):
    """Create a new post"""
    new_post = Post(user_id=current_user.id, content_ref=post.content_ref)
    session.add(new_post)
    session.flush()  # Flush to get the post ID

    set_tags(session, new_post.id, parse_tag_field(post.tags))
    session.commit()

    return post_search.get_post(session, new_post.id)

@router.get("/{post_id}", response_model=PostResponse, summary="Get a specific post")
def get_post(
    post_id: int,
    session: Session = Depends(get_session),
    current_user: User | None = Depends(get_optional_current_user)
):
    """Get a specific post"""
    post = post_search.get_post(session, post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )

    if current_user:
        post["liked"] = session.get(Like, (current_user.id, post_id)) is not None
        post["favorited"] = session.get(Favorite, (current_user.id, post_id)) is not None
    return post

@router.put("/{post_id}", response_model=PostResponse, summary="Edit the tags of a post")
def update_post(
    post_id: int,
    post_update: PostUpdate,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    """Edit the tags of a post

    A blank or missing tag field keeps the current tags, clear_tags removes them all.
    """
    get_own_post(session, post_id, current_user)

    if post_update.clear_tags:
        set_tags(session, post_id, [])
    elif post_update.tags is not None and post_update.tags.strip():
        set_tags(session, post_id, parse_tag_field(post_update.tags))
    session.commit()

    return post_search.get_post(session, post_id)

@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a post")
def delete_post(
    post_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    """Delete a post with its tag links, likes and favorites

    Tags stay in the vocabulary even when no post uses them anymore.
    """
    post = get_own_post(session, post_id, current_user)

    session.execute(delete(PostTag).where(PostTag.post_id == post_id))
    session.execute(delete(Like).where(Like.post_id == post_id))
    session.execute(delete(Favorite).where(Favorite.post_id == post_id))
    session.delete(post)
    session.commit()
    return None
