from ..models import AsyncSessionLocal
from ..models.posts import Post, NOTICE_CATEGORY
from sqlalchemy import select, update, func, case

COUNTER_COLUMNS = ('view_count', 'like_count', 'dislike_count')


def _filtered(stmt, category: str | None = None, keyword: str | None = None):
    stmt = stmt.where(Post.is_deleted.is_(False))
    if category:
        stmt = stmt.where(Post.category == category)
    if keyword and keyword.strip():
        stmt = stmt.where(func.lower(Post.title).contains(keyword.strip().lower(), autoescape=True))
    return stmt

async def list_posts(category: str | None = None, keyword: str | None = None, offset: int = 0, limit: int = 50):
    async with AsyncSessionLocal() as session:
        notice_first = case((Post.category == NOTICE_CATEGORY, 0), else_=1)
        q = _filtered(select(Post), category, keyword).order_by(
            notice_first, Post.created_at.desc(), Post.id.desc()
        ).offset(offset).limit(limit)
        res = await session.execute(q)
        return res.scalars().all()

async def count_posts(category: str | None = None, keyword: str | None = None) -> int:
    async with AsyncSessionLocal() as session:
        res = await session.execute(_filtered(select(func.count(Post.id)), category, keyword))
        return res.scalar_one()

async def list_all_posts():
    async with AsyncSessionLocal() as session:
        res = await session.execute(select(Post).where(Post.is_deleted.is_(False)).order_by(Post.id.asc()))
        return res.scalars().all()

async def get_post(post_id: int):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Post).where(Post.id == post_id, Post.is_deleted.is_(False)))
        return q.scalars().first()

async def create_post(category: str, title: str, content: str, author: str, author_ip: str | None = None,
                      file_name: str | None = None, file_path: str | None = None, file_size: int | None = None):
    async with AsyncSessionLocal() as session:
        post = Post(
            category=category,
            title=title,
            content=content,
            author=author,
            author_ip=author_ip,
            file_name=file_name,
            file_path=file_path,
            file_size=file_size,
        )
        session.add(post)
        await session.commit()
        await session.refresh(post)
        return post

async def update_post(post_id: int, category: str, title: str, content: str, author: str,
                      file_name: str | None = None, file_path: str | None = None, file_size: int | None = None):
    async with AsyncSessionLocal() as session:
        q = await session.execute(select(Post).where(Post.id == post_id, Post.is_deleted.is_(False)))
        post = q.scalars().first()
        if not post:
            return None
        post.category = category
        post.title = title
        post.content = content
        post.author = author
        # attachment is only replaced when a new file came with the edit
        if file_name:
            post.file_name = file_name
            post.file_path = file_path
            post.file_size = file_size
        post.updated_at = func.now()
        await session.commit()
        await session.refresh(post)
        return post

async def soft_delete_post(post_id: int) -> bool:
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            update(Post)
            .where(Post.id == post_id, Post.is_deleted.is_(False))
            .values(is_deleted=True)
        )
        await session.commit()
        return res.rowcount > 0

async def increment_counter(post_id: int, column: str) -> bool:
    if column not in COUNTER_COLUMNS:
        raise ValueError(f'unknown counter column: {column}')
    counter = getattr(Post, column)
    async with AsyncSessionLocal() as session:
        res = await session.execute(
            update(Post)
            .where(Post.id == post_id, Post.is_deleted.is_(False))
            .values({counter: counter + 1})
        )
        await session.commit()
        return res.rowcount > 0
