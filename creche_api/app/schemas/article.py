from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator


class ArticleCreate(BaseModel):
    title: str
    content: str
    creche_id: Optional[int] = None
    image_url: Optional[str] = None

    @field_validator("title", "content")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Field is required")
        return value


class ArticleRead(BaseModel):
    id: int
    creche_id: Optional[int] = None
    author_id: Optional[int] = None
    title: str
    content: str
    image_url: Optional[str] = None
    hearts: int
    liked_by_me: bool = False
    follower_count: int = 0
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LikeToggleResult(BaseModel):
    article_id: int
    liked: bool
    hearts: int


class CommentCreate(BaseModel):
    content: str


class CommentRead(BaseModel):
    id: int
    article_id: int
    user_id: int
    content: str
    author_name: str
    created_at: datetime


class LikerRead(BaseModel):
    user_id: int
    name: str
    liked_at: datetime
