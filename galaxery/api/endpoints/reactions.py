from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import and_, delete, func, select
from sqlalchemy.orm import Session

from galaxery.core.errors import translate_storage_errors
from galaxery.core.security import get_current_user
from galaxery.db.database import dialect_insert, get_session
from galaxery.models.user import User
from galaxery.models.post import Post
from galaxery.models.reaction import Favorite, Like
from galaxery.schemas.reaction import LikeResponse, FavoriteResponse

router = APIRouter()

def get_target_post(session: Session, post_id: int) -> Post:
    """Get the post being reacted to"""
    post = session.get(Post, post_id)
    if not post:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Post not found"
        )
    return post

@translate_storage_errors
def toggle(session: Session, model, user_id: int, post_id: int) -> bool:
    """Flip a (user, post) mark and return whether it is now set

    The insert is ignored when the row already exists, in which case the row is
    removed instead, so there is never more than one row per pair.
    """
    stmt = dialect_insert(session, model).values(user_id=user_id, post_id=post_id)
    result = session.execute(stmt.on_conflict_do_nothing(index_elements=["user_id", "post_id"]))
    if result.rowcount:
        session.commit()
        return True

    session.execute(
        delete(model).where(and_(model.user_id == user_id, model.post_id == post_id))
    )
    session.commit()
    return False

@router.post("/like", response_model=LikeResponse, summary="Like or unlike a post")
def like_post(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)]
):
    """Toggle the current user's like on a post"""
    get_target_post(session, post_id)
    liked = toggle(session, Like, current_user.id, post_id)
    likes = session.scalar(select(func.count()).select_from(Like).where(Like.post_id == post_id))
    return {"liked": liked, "likes": likes}

@router.post("/favorite", response_model=FavoriteResponse, summary="Favorite or unfavorite a post")
def favorite_post(
    post_id: int,
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)]
):
    """Toggle the current user's favorite mark on a post"""
    get_target_post(session, post_id)
    favorited = toggle(session, Favorite, current_user.id, post_id)
    return {"favorited": favorited}
