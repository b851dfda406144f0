"""Article feed, likes and comments.

``articles.hearts`` is a denormalized count of ``article_likes`` rows. The
like toggle writes the relationship row and the counter in one transaction,
and ``reconcile_hearts`` recomputes the counter from the relationship table
for rows written before that was true or by other clients.
"""

import logging

from sqlalchemy import case, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from creche_api.app.core.errors import ConflictError, NotFoundError, ValidationFailed
from creche_api.app.models.article import Article, ArticleComment, ArticleLike
from creche_api.app.models.favorite import UserFavorite
from creche_api.app.models.user import User
from creche_api.app.services.creches import follower_counts, get_creche

logger = logging.getLogger(__name__)


def _author_name(user: User | None) -> str:
    if user is None:
        return "Unknown"
    return user.display_name or user.full_name or user.email


def get_article(db: Session, article_id: int) -> Article:
    article = db.query(Article).filter(Article.id == article_id).first()
    if not article:
        raise NotFoundError("Article not found")
    return article


def liked_article_ids(db: Session, user_id: int, article_ids: list[int]) -> set[int]:
    if not article_ids:
        return set()
    rows = (
        db.query(ArticleLike.article_id)
        .filter(ArticleLike.user_id == user_id, ArticleLike.article_id.in_(article_ids))
        .all()
    )
    return {row.article_id for row in rows}


def list_articles(
    db: Session,
    user_id: int,
    creche_id: int | None = None,
    favorites_only: bool = False,
    sort: str = "recent",
    limit: int = 50,
) -> list[dict]:
    """Feed for ``user_id``; ``sort="popular"`` puts the most hearted articles first."""
    query = db.query(Article)
    if creche_id is not None:
        query = query.filter(Article.creche_id == creche_id)
    if favorites_only:
        favorite_creches = db.query(UserFavorite.creche_id).filter(UserFavorite.user_id == user_id)
        query = query.filter(Article.creche_id.in_(favorite_creches))
    if sort == "popular":
        query = query.order_by(Article.hearts.desc(), Article.created_at.desc(), Article.id.desc())
    else:
        query = query.order_by(Article.created_at.desc(), Article.id.desc())
    articles = query.limit(limit).all()
    liked = liked_article_ids(db, user_id, [article.id for article in articles])
    followers = follower_counts(db, {article.creche_id for article in articles if article.creche_id is not None})
    return [
        article_payload(article, article.id in liked, followers.get(article.creche_id, 0))
        for article in articles
    ]


def article_payload(article: Article, liked_by_me: bool, follower_count: int = 0) -> dict:
    return {
        "id": article.id,
        "creche_id": article.creche_id,
        "author_id": article.author_id,
        "title": article.title,
        "content": article.content,
        "image_url": article.image_url,
        "hearts": article.hearts,
        "liked_by_me": liked_by_me,
        "follower_count": follower_count,
        "created_at": article.created_at,
    }


def create_article(db: Session, author_id: int, title: str, content: str, creche_id: int | None = None, image_url: str | None = None) -> Article:
    if not title.strip() or not content.strip():
        raise ValidationFailed("Please fill in both title and content")
    if creche_id is not None:
        get_creche(db, creche_id)
    article = Article(
        author_id=author_id,
        creche_id=creche_id,
        title=title.strip(),
        content=content.strip(),
        image_url=image_url,
        hearts=0,
    )
    db.add(article)
    db.commit()
    db.refresh(article)
    return article


def toggle_like(db: Session, article_id: int, user_id: int) -> dict:
    """Like or unlike an article, keeping ``hearts`` in step with the like rows."""
    article = get_article(db, article_id)
    existing = (
        db.query(ArticleLike)
        .filter(ArticleLike.article_id == article_id, ArticleLike.user_id == user_id)
        .first()
    )
    try:
        if existing:
            db.delete(existing)
            db.query(Article).filter(Article.id == article_id).update(
                {Article.hearts: case((Article.hearts > 0, Article.hearts - 1), else_=0)}, synchronize_session=False
            )
            liked = False
        else:
            db.add(ArticleLike(article_id=article_id, user_id=user_id))
            db.flush()
            db.query(Article).filter(Article.id == article_id).update(
                {Article.hearts: Article.hearts + 1}, synchronize_session=False
            )
            liked = True
        db.commit()
    except IntegrityError as exc:
        # Two toggles raced to insert the same like
        db.rollback()
        raise ConflictError("Like state changed, refresh and try again") from exc
    db.refresh(article)
    return {"article_id": article.id, "liked": liked, "hearts": article.hearts}


def list_likers(db: Session, article_id: int) -> list[dict]:
    get_article(db, article_id)
    rows = (
        db.query(ArticleLike, User)
        .join(User, ArticleLike.user_id == User.id)
        .filter(ArticleLike.article_id == article_id)
        .order_by(ArticleLike.created_at.desc(), ArticleLike.id.desc())
        .all()
    )
    return [{"user_id": user.id, "name": _author_name(user), "liked_at": like.created_at} for like, user in rows]


def reconcile_hearts(db: Session, article_id: int | None = None) -> dict[int, tuple[int, int]]:
    """Reset ``hearts`` to the real like count; returns {article_id: (old, new)} for fixed rows."""
    counts = dict(
        db.query(ArticleLike.article_id, func.count(ArticleLike.id))
        .group_by(ArticleLike.article_id)
        .all()
    )
    query = db.query(Article)
    if article_id is not None:
        query = query.filter(Article.id == article_id)
    corrected = {}
    for article in query.all():
        actual = counts.get(article.id, 0)
        if article.hearts != actual:
            corrected[article.id] = (article.hearts, actual)
            article.hearts = actual
    db.commit()
    if corrected:
        logger.warning("Reconciled hearts on %d article(s)", len(corrected))
    return corrected


def comment_payload(comment: ArticleComment) -> dict:
    return {
        "id": comment.id,
        "article_id": comment.article_id,
        "user_id": comment.user_id,
        "content": comment.content,
        "author_name": _author_name(comment.user),
        "created_at": comment.created_at,
    }


def list_comments(db: Session, article_id: int) -> list[dict]:
    get_article(db, article_id)
    comments = (
        db.query(ArticleComment)
        .filter(ArticleComment.article_id == article_id)
        .order_by(ArticleComment.created_at.desc(), ArticleComment.id.desc())
        .all()
    )
    return [comment_payload(comment) for comment in comments]


def add_comment(db: Session, article_id: int, user_id: int, content: str) -> dict:
    get_article(db, article_id)
    content = (content or "").strip()
    if not content:
        raise ValidationFailed("Comment cannot be empty")
    comment = ArticleComment(article_id=article_id, user_id=user_id, content=content)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    return comment_payload(comment)
