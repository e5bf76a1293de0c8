from pydantic import BaseModel, Field

class LikeResponse(BaseModel):
    """Like toggle result"""
    liked: bool = Field(..., description="Whether the post is now liked by the user")
    likes: int = Field(..., description="Like count of the post")

class FavoriteResponse(BaseModel):
    """Favorite toggle result"""
    favorited: bool = Field(..., description="Whether the post is now favorited by the user")
