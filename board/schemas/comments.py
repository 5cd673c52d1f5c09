from datetime import datetime
from pydantic import BaseModel, Field
from typing import Optional, List

class CommentIn(BaseModel):
    author: Optional[str] = None
    content: Optional[str] = None
    parent_id: Optional[int] = None

    def validation_errors(self) -> List[str]:
        errors = []
        if self.author is None or not self.author.strip():
            errors.append('Author is required')
        if self.content is None or not self.content.strip():
            errors.append('Comment content is required')
        return errors

class CommentUpdateIn(BaseModel):
    content: Optional[str] = None

    def validation_errors(self) -> List[str]:
        if self.content is None or not self.content.strip():
            return ['Comment content is required']
        return []

class CommentOut(BaseModel):
    id: int
    post_id: int
    parent_id: Optional[int] = None
    author: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    replies: List['CommentOut'] = Field(default_factory=list)

    class Config:
        from_attributes = True
