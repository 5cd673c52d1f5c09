from datetime import datetime
from pydantic import BaseModel, Field, computed_field
from typing import Optional, List

from ..models.posts import CATEGORIES, DEFAULT_CATEGORY
from ..utils import format_file_size
from .comments import CommentOut


def _blank(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class AttachmentInfo(BaseModel):
    file_name: str
    file_path: str
    file_size: int


class PostCreateIn(BaseModel):
    category: Optional[str] = None
    title: Optional[str] = None
    content: Optional[str] = None
    author: Optional[str] = None

    @property
    def resolved_category(self) -> str:
        if _blank(self.category):
            return DEFAULT_CATEGORY
        return self.category.strip()

    def validation_errors(self) -> List[str]:
        errors = []
        if _blank(self.title):
            errors.append('Title is required')
        if _blank(self.author):
            errors.append('Author is required')
        if _blank(self.content):
            errors.append('Content is required')
        if self.resolved_category not in CATEGORIES:
            errors.append(f'Unknown category: {self.category}')
        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()


class PostUpdateIn(PostCreateIn):
    pass


class PostListOut(BaseModel):
    id: int
    category: str
    title: str
    author: str
    view_count: int
    comment_count: Optional[int] = None
    file_name: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

    @computed_field
    @property
    def has_file(self) -> bool:
        return bool(self.file_name)


class PostListPage(BaseModel):
    items: List[PostListOut]
    total: int
    offset: int
    limit: int


class PostDetailOut(BaseModel):
    id: int
    category: str
    title: str
    content: str
    author: str
    view_count: int
    like_count: int
    dislike_count: int
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    formatted_file_size: str = ''
    has_file: bool = False
    attachment_url: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    is_modified: bool = False
    comment_count: int = 0
    comments: List[CommentOut] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, post, comments: Optional[List[CommentOut]] = None, comment_count: int = 0):
        has_file = bool(post.file_name)
        return cls(
            id=post.id,
            category=post.category,
            title=post.title,
            content=post.content,
            author=post.author,
            view_count=post.view_count or 0,
            like_count=post.like_count or 0,
            dislike_count=post.dislike_count or 0,
            file_name=post.file_name,
            file_size=post.file_size,
            formatted_file_size=format_file_size(post.file_size or 0),
            has_file=has_file,
            attachment_url=f'/api/posts/{post.id}/attachment' if has_file else None,
            created_at=post.created_at,
            updated_at=post.updated_at,
            is_modified=post.updated_at is not None,
            comment_count=comment_count,
            comments=comments or [],
        )


class ReactionOut(BaseModel):
    id: int
    like_count: int
    dislike_count: int


class ActionOkOut(BaseModel):
    ok: bool = True
    message: Optional[str] = None
