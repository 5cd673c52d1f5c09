from fastapi import APIRouter
from .posts import router as posts_router
from .comments import router as comments_router
from .admin import router as admin_router

router = APIRouter()
router.include_router(posts_router, prefix='/posts', tags=['posts'])
router.include_router(comments_router, tags=['comments'])
router.include_router(admin_router, prefix='/admin', tags=['admin'])
