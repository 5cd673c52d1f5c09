from ..models import AsyncSessionLocal
from ..models.comments import Comment
from sqlalchemy import select, update, func

async def list_comments(post_id: int):
    """Comments of a post, each root comment followed by its replies."""
    async with AsyncSessionLocal() as session:
        q = (
            select(Comment)
            .where(Comment.post_id == post_id, Comment.is_deleted.is_(False))
            .order_by(
                func.coalesce(Comment.parent_id, Comment.id),
                Comment.parent_id.is_not(None),
                Comment.created_at.asc(),
                Comment.id.asc(),
            )
        )
        res = await session.execute(q)
        return res.scalars().all()

async def get_comment(comment_id: int):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Comment).where(Comment.id == comment_id, Comment.is_deleted.is_(False)))
        return q.scalars().first()

async def create_comment(post_id: int, author: str, content: str, author_ip: str | None = None, parent_id: int | None = None):
    async with AsyncSessionLocal() as session:
        c = Comment(post_id=post_id, author=author, content=content, author_ip=author_ip, parent_id=parent_id)
        session.add(c)
        await session.commit()
        await session.refresh(c)
        return c

async def update_comment(comment_id: int, content: str):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Comment).where(Comment.id == comment_id, Comment.is_deleted.is_(False)))
        c = q.scalars().first()
        if not c:
            return None
        c.content = content
        c.updated_at = func.now()
        await session.commit()
        await session.refresh(c)
        return c

async def soft_delete_comment(comment_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            update(Comment)
            .where(Comment.id == comment_id, Comment.is_deleted.is_(False))
            .values(is_deleted=True, updated_at=func.now())
        )
        await session.commit()
        return res.rowcount > 0

async def count_comments(post_id: int) -> int:
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            select(func.count(Comment.id)).where(Comment.post_id == post_id, Comment.is_deleted.is_(False))
        )
        return res.scalar_one()

async def count_comments_by_post(post_ids) -> dict:
    """Live comment count per post id in one grouped query; posts without comments are absent."""
    if not post_ids:
        return {}
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            select(Comment.post_id, func.count(Comment.id))
            .where(Comment.post_id.in_(post_ids), Comment.is_deleted.is_(False))
            .group_by(Comment.post_id)
        )
        return {post_id: count for post_id, count in res.all()}
