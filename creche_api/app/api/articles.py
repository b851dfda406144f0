"""Community feed endpoints: articles, likes and comments."""

from typing import Literal

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from creche_api.app.db.session import get_db
from creche_api.app.dependencies.auth import get_current_user
from creche_api.app.models.user import User
from creche_api.app.schemas.article import (
    ArticleCreate,
    ArticleRead,
    CommentCreate,
    CommentRead,
    LikerRead,
    LikeToggleResult,
)
from creche_api.app.services import articles as articles_service
from creche_api.app.services.creches import follower_counts

router = APIRouter(prefix="/articles", tags=["articles"])


@router.get("", response_model=list[ArticleRead])
async def list_articles(
    creche_id: int | None = None,
    favorites_only: bool = False,
    sort: Literal["recent", "popular"] = "recent",
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return articles_service.list_articles(
        db, current_user.id, creche_id=creche_id, favorites_only=favorites_only, sort=sort
    )


@router.post("", response_model=ArticleRead, status_code=status.HTTP_201_CREATED)
async def create_article(article_in: ArticleCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    article = articles_service.create_article(db, current_user.id, **article_in.model_dump())
    return articles_service.article_payload(article, liked_by_me=False)


@router.get("/{article_id}", response_model=ArticleRead)
async def get_article(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    article = articles_service.get_article(db, article_id)
    liked = article.id in articles_service.liked_article_ids(db, current_user.id, [article.id])
    followers = follower_counts(db, [article.creche_id]) if article.creche_id is not None else {}
    return articles_service.article_payload(article, liked, followers.get(article.creche_id, 0))


@router.post("/{article_id}/like", response_model=LikeToggleResult)
async def toggle_like(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return articles_service.toggle_like(db, article_id, current_user.id)


@router.get("/{article_id}/likes", response_model=list[LikerRead])
async def list_likers(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return articles_service.list_likers(db, article_id)


@router.get("/{article_id}/comments", response_model=list[CommentRead])
async def list_comments(article_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return articles_service.list_comments(db, article_id)


@router.post("/{article_id}/comments", response_model=CommentRead, status_code=status.HTTP_201_CREATED)
async def add_comment(
    article_id: int,
    comment_in: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return articles_service.add_comment(db, article_id, current_user.id, comment_in.content)
