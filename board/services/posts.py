"""
Post service: validation, DTO mapping and CSV import/export on top of the post DAO
"""
import logging
from typing import Dict, List, Optional, Tuple

from fastapi import HTTPException

from ..crud import posts as post_dao
from ..crud import comments as comment_dao
from ..core import POSTS_CREATED, CSV_ROWS_IMPORTED
from ..file_storage import file_storage
from ..models.posts import CATEGORIES
from ..schemas.csv import CsvImportOut
from ..schemas.posts import (
    AttachmentInfo,
    PostCreateIn,
    PostUpdateIn,
    PostDetailOut,
    PostListOut,
    PostListPage,
    ReactionOut,
)
from .comments import comment_service

logger = logging.getLogger(__name__)

IMPORT_HEADERS = ('category', 'title', 'content', 'author')
EXPORT_HEADERS = ('id', 'category', 'title', 'content', 'author', 'view_count', 'created_at')
REACTION_COLUMNS = {'like': 'like_count', 'dislike': 'dislike_count'}
MAX_PAGE_SIZE = 100


class PostService:

    async def list_posts(self, category: Optional[str] = None, keyword: Optional[str] = None,
                         offset: int = 0, limit: int = 50) -> PostListPage:
        logger.info({'msg': 'list_posts', 'category': category, 'keyword': keyword})
        category = (category or '').strip() or None
        if category and category not in CATEGORIES:
            raise HTTPException(400, f'Unknown category: {category}')
        offset = max(offset, 0)
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        posts = await post_dao.list_posts(category, keyword, offset, limit)
        total = await post_dao.count_posts(category, keyword)
        counts = await comment_dao.count_comments_by_post([p.id for p in posts])
        items = []
        for p in posts:
            item = PostListOut.model_validate(p)
            item.comment_count = counts.get(p.id, 0)
            items.append(item)
        logger.debug(f'list_posts returned {len(items)} of {total}')
        return PostListPage(items=items, total=total, offset=offset, limit=limit)

    async def get_post_detail(self, post_id: int) -> PostDetailOut:
        """Detail view; every call counts as one view"""
        logger.info(f'Post detail requested: {post_id}')
        if not await post_dao.increment_counter(post_id, 'view_count'):
            logger.error(f'Post not found: {post_id}')
            raise HTTPException(404, 'Post not found')
        post = await post_dao.get_post(post_id)
        if not post:
            raise HTTPException(404, 'Post not found')
        comments = await comment_service.build_thread(post_id)
        count = await comment_dao.count_comments(post_id)
        return PostDetailOut.from_entity(post, comments=comments, comment_count=count)

    async def get_post_for_edit(self, post_id: int) -> PostDetailOut:
        """Same data as the detail view without touching the view counter"""
        logger.info(f'Post edit data requested: {post_id}')
        post = await post_dao.get_post(post_id)
        if not post:
            logger.error(f'Post not found: {post_id}')
            raise HTTPException(404, 'Post not found')
        count = await comment_dao.count_comments(post_id)
        return PostDetailOut.from_entity(post, comment_count=count)

    async def create_post(self, payload: PostCreateIn, author_ip: Optional[str] = None,
                          attachment: Optional[AttachmentInfo] = None) -> PostDetailOut:
        logger.info(f'Creating post by {payload.author!r}')
        errors = payload.validation_errors()
        if errors:
            logger.warning(f'Post validation failed: {errors}')
            raise HTTPException(400, errors)

        post = await post_dao.create_post(
            category=payload.resolved_category,
            title=payload.title.strip(),
            content=payload.content,
            author=payload.author.strip(),
            author_ip=author_ip,
            file_name=attachment.file_name if attachment else None,
            file_path=attachment.file_path if attachment else None,
            file_size=attachment.file_size if attachment else None,
        )
        POSTS_CREATED.inc()
        logger.debug(f'Post created: {post.id}')
        return PostDetailOut.from_entity(post)

    async def update_post(self, post_id: int, payload: PostUpdateIn,
                          attachment: Optional[AttachmentInfo] = None) -> PostDetailOut:
        logger.info(f'Updating post {post_id}')
        errors = payload.validation_errors()
        if errors:
            logger.warning(f'Post validation failed: {errors}')
            raise HTTPException(400, errors)

        post = await post_dao.update_post(
            post_id,
            category=payload.resolved_category,
            title=payload.title.strip(),
            content=payload.content,
            author=payload.author.strip(),
            file_name=attachment.file_name if attachment else None,
            file_path=attachment.file_path if attachment else None,
            file_size=attachment.file_size if attachment else None,
        )
        if not post:
            logger.error(f'Post update failed, not found: {post_id}')
            raise HTTPException(404, 'Post not found')
        count = await comment_dao.count_comments(post_id)
        logger.debug(f'Post updated: {post_id} by {post.author!r}')
        return PostDetailOut.from_entity(post, comment_count=count)

    async def delete_post(self, post_id: int) -> None:
        logger.info(f'Deleting post {post_id}')
        if not await post_dao.soft_delete_post(post_id):
            logger.error(f'Post delete failed, not found: {post_id}')
            raise HTTPException(404, 'Post not found')
        logger.info(f'Post deleted: {post_id}')

    async def react(self, post_id: int, reaction: str) -> ReactionOut:
        column = REACTION_COLUMNS.get(reaction)
        if column is None:
            raise HTTPException(400, f'Unknown reaction: {reaction}')
        if not await post_dao.increment_counter(post_id, column):
            raise HTTPException(404, 'Post not found')
        post = await post_dao.get_post(post_id)
        if not post:
            raise HTTPException(404, 'Post not found')
        return ReactionOut(id=post.id, like_count=post.like_count, dislike_count=post.dislike_count)

    async def get_attachment(self, post_id: int) -> Tuple[str, str]:
        post = await post_dao.get_post(post_id)
        if not post or not post.file_name:
            logger.error(f'Attachment not found for post {post_id}')
            raise HTTPException(404, 'Attachment not found')
        path = file_storage.resolve_path(post.file_path)
        if not path:
            logger.error(f'Attachment file missing on disk: {post.file_path}')
            raise HTTPException(404, 'Attachment file does not exist')
        return path, post.file_name

    async def import_posts(self, rows: List[Tuple[int, Dict[str, str]]], author_ip: Optional[str] = None) -> CsvImportOut:
        """Create one post per CSV row; bad rows are reported, good rows still land"""
        logger.info(f'CSV import started: {len(rows)} rows')
        result = CsvImportOut()
        for line, row in rows:
            payload = PostCreateIn(
                category=row.get('category'),
                title=row.get('title'),
                content=row.get('content'),
                author=row.get('author'),
            )
            errors = payload.validation_errors()
            if errors:
                result.add_failure(f"Row {line}: {', '.join(errors)}")
                CSV_ROWS_IMPORTED.labels(result='failed').inc()
                continue
            try:
                await self.create_post(payload, author_ip=author_ip)
            except Exception as e:
                logger.error(f'CSV import row {line} failed: {e}')
                result.add_failure(f'Row {line}: {e}')
                CSV_ROWS_IMPORTED.labels(result='failed').inc()
                continue
            result.add_success()
            CSV_ROWS_IMPORTED.labels(result='imported').inc()
        logger.info(f'CSV import finished: {result.success_count} imported, {result.fail_count} failed')
        return result

    async def export_rows(self) -> List[List[str]]:
        posts = await post_dao.list_all_posts()
        return [
            [
                str(p.id),
                p.category,
                p.title,
                p.content,
                p.author,
                str(p.view_count or 0),
                p.created_at.isoformat(sep=' ', timespec='seconds') if p.created_at else '',
            ]
            for p in posts
        ]


post_service = PostService()
