from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from galaxery.services.post_search import PostSort

class PostCreate(BaseModel):
    """Create post request"""
    content_ref: str = Field(..., min_length=1, description="URL or path of the uploaded image")
    tags: str = Field(default="", description="Tag field text, only #-prefixed words become tags")

class PostUpdate(BaseModel):
    """Edit post tags request"""
    tags: Optional[str] = Field(default=None, description="New tag field text, blank keeps the current tags")
    clear_tags: bool = Field(default=False, description="Remove every tag from the post")

class PostResponse(BaseModel):
    """Post response"""
    id: int
    owner_id: int
    owner_name: Optional[str] = None
    content_ref: str
    created_at: datetime
    like_count: int = 0
    tag_names: List[str] = Field(default_factory=list)
    liked: Optional[bool] = Field(default=None, description="Set when the request is authenticated")
    favorited: Optional[bool] = Field(default=None, description="Set when the request is authenticated")

class PostPage(BaseModel):
    """One page of posts"""
    posts: List[PostResponse]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    sort: PostSort
    tags: List[str] = Field(default_factory=list, description="Normalized tags the search used")
