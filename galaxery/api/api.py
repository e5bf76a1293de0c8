from fastapi import APIRouter
from galaxery.api.endpoints import (
    users,
    posts,
    reactions,
    tags
)

api_router = APIRouter()

api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(posts.router, prefix="/posts", tags=["posts"])
api_router.include_router(reactions.router, prefix="/posts/{post_id}", tags=["reactions"])
api_router.include_router(tags.router, prefix="/tags", tags=["tags"])
