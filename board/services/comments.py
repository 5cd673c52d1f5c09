import logging
from typing import List, Optional

from fastapi import HTTPException

from ..crud import comments as comment_dao
from ..crud import posts as post_dao
from ..core import COMMENTS_CREATED
from ..schemas.comments import CommentIn, CommentUpdateIn, CommentOut

logger = logging.getLogger(__name__)


class CommentService:

    async def build_thread(self, post_id: int) -> List[CommentOut]:
        """Group the flat, thread-ordered rows into roots with their replies.

        A reply whose root was deleted is listed at the top level.
        """
        roots: List[CommentOut] = []
        by_id = {}
        for c in await comment_dao.list_comments(post_id):
            out = CommentOut.model_validate(c)
            parent = by_id.get(c.parent_id) if c.parent_id else None
            if parent is not None:
                parent.replies.append(out)
            else:
                roots.append(out)
                by_id[c.id] = out
        return roots

    async def list_comments(self, post_id: int) -> List[CommentOut]:
        logger.debug(f'Listing comments for post {post_id}')
        if not await post_dao.get_post(post_id):
            raise HTTPException(404, 'Post not found')
        thread = await self.build_thread(post_id)
        logger.info(f'Comments listed for post {post_id}: {len(thread)} threads')
        return thread

    async def _resolve_parent(self, post_id: int, parent_id: Optional[int]) -> Optional[int]:
        if parent_id is None:
            return None
        parent = await comment_dao.get_comment(parent_id)
        if not parent or parent.post_id != post_id:
            raise HTTPException(400, 'Parent comment does not exist on this post')
        # threads are one level deep; a reply whose root is gone becomes the root
        if parent.parent_id and await comment_dao.get_comment(parent.parent_id):
            return parent.parent_id
        return parent.id

    async def add_comment(self, post_id: int, payload: CommentIn, author_ip: Optional[str] = None) -> CommentOut:
        logger.debug(f'Adding comment to post {post_id} by {payload.author!r}')
        errors = payload.validation_errors()
        if post_id <= 0:
            errors.insert(0, 'Invalid post id')
        if errors:
            logger.warning(f'Comment validation failed: {errors}')
            raise HTTPException(400, errors)
        if not await post_dao.get_post(post_id):
            raise HTTPException(404, 'Post not found')

        parent_id = await self._resolve_parent(post_id, payload.parent_id)
        c = await comment_dao.create_comment(
            post_id=post_id,
            author=payload.author.strip(),
            content=payload.content,
            author_ip=author_ip,
            parent_id=parent_id,
        )
        COMMENTS_CREATED.inc()
        logger.info(f'Comment {c.id} added to post {post_id}')
        return CommentOut.model_validate(c)

    async def _get_live_comment(self, comment_id: int):
        """Comment that is not deleted and whose post is not deleted either"""
        c = await comment_dao.get_comment(comment_id)
        if not c or not await post_dao.get_post(c.post_id):
            logger.warning(f'Comment not found: {comment_id}')
            raise HTTPException(404, 'Comment not found')
        return c

    async def get_comment(self, comment_id: int) -> CommentOut:
        return CommentOut.model_validate(await self._get_live_comment(comment_id))

    async def update_comment(self, comment_id: int, payload: CommentUpdateIn) -> CommentOut:
        logger.debug(f'Updating comment {comment_id}')
        errors = payload.validation_errors()
        if errors:
            raise HTTPException(400, errors)
        await self._get_live_comment(comment_id)
        c = await comment_dao.update_comment(comment_id, payload.content)
        if not c:
            logger.error(f'Comment update failed, not found: {comment_id}')
            raise HTTPException(404, 'Comment not found')
        logger.info(f'Comment updated: {comment_id}')
        return CommentOut.model_validate(c)

    async def delete_comment(self, comment_id: int) -> None:
        logger.debug(f'Deleting comment {comment_id}')
        await self._get_live_comment(comment_id)
        if not await comment_dao.soft_delete_comment(comment_id):
            logger.error(f'Comment delete failed, not found: {comment_id}')
            raise HTTPException(404, 'Comment not found')
        logger.info(f'Comment deleted: {comment_id}')


comment_service = CommentService()
