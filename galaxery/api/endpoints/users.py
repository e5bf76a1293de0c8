from datetime import timedelta
from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session
from galaxery.core.security import (
    get_password_hash,
    verify_password,
    create_access_token,
    get_current_user,
    ACCESS_TOKEN_EXPIRE_MINUTES
)
from galaxery.db.database import get_session
from galaxery.models.user import User
from galaxery.schemas.post import PostPage
from galaxery.schemas.user import UserCreate, UserResponse, Token, UserLogin
from galaxery.services import post_search
from galaxery.services.post_search import PAGE_SIZE, MAX_PAGE_SIZE, PostSort
from galaxery.api.endpoints.posts import page_response

router = APIRouter()

@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    user_in: UserCreate,
    session: Annotated[Session, Depends(get_session)]
) -> User:
    """Create a new user"""
    username = user_in.username.strip()
    result = session.execute(
        select(User).where(User.username == username)
    )
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=400,
            detail="Username already exists"
        )

    user = User(
        username=username,
        password_hash=get_password_hash(user_in.password)
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user

@router.post("/login", response_model=Token)
def login(
    user_in: UserLogin,
    session: Annotated[Session, Depends(get_session)]
) -> dict:
    """Login a user"""
    result = session.execute(
        select(User).where(User.username == user_in.username.strip())
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(user_in.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(
        data={"sub": user.username},
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/me", response_model=UserResponse)
def read_users_me(
    current_user: Annotated[User, Depends(get_current_user)]
) -> User:
    """Get the current user"""
    return current_user

@router.get("/me/posts", response_model=PostPage)
def read_my_posts(
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
    page: int = 1,
    page_size: int = Query(PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
) -> dict:
    """List the current user's posts, newest first"""
    result = post_search.search_posts(
        session, page=page, page_size=page_size, owner_id=current_user.id
    )
    return page_response(result, page, page_size, PostSort.NEWEST)

@router.get("/me/favorites", response_model=PostPage)
def read_my_favorites(
    current_user: Annotated[User, Depends(get_current_user)],
    session: Annotated[Session, Depends(get_session)],
    page: int = 1,
    page_size: int = Query(PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
) -> dict:
    """List the posts the current user has favorited, newest first"""
    result = post_search.search_posts(
        session, page=page, page_size=page_size, favorited_by=current_user.id
    )
    return page_response(result, page, page_size, PostSort.NEWEST)

def get_user_or_404(session: Session, user_id: int) -> User:
    user = session.get(User, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user

@router.get("/{user_id}", response_model=UserResponse)
def read_user(
    user_id: int,
    session: Annotated[Session, Depends(get_session)]
) -> User:
    """Get a user's public profile"""
    return get_user_or_404(session, user_id)

@router.get("/{user_id}/posts", response_model=PostPage)
def read_user_posts(
    user_id: int,
    session: Annotated[Session, Depends(get_session)],
    page: int = 1,
    page_size: int = Query(PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)
) -> dict:
    """List a user's posts, newest first"""
    get_user_or_404(session, user_id)
    result = post_search.search_posts(
        session, page=page, page_size=page_size, owner_id=user_id
    )
    return page_response(result, page, page_size, PostSort.NEWEST)
