from datetime import datetime
from pydantic import BaseModel, Field

class TagSuggestion(BaseModel):
    """Tag name with its usage count"""
    name: str = Field(..., description="Tag name")
    count: int = Field(..., description="Number of posts with this tag")

class TagResponse(BaseModel):
    """Tag response"""
    id: int = Field(..., description="Tag ID")
    name: str = Field(..., description="Tag name")
    created_at: datetime = Field(..., description="Creation time")
    usage_count: int = Field(..., description="Number of posts with this tag")
