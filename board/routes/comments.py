from fastapi import APIRouter, Request
from typing import List

from ..schemas.comments import CommentIn, CommentUpdateIn, CommentOut
from ..schemas.posts import ActionOkOut
from ..services.comments import comment_service
from ..utils import get_client_ip

router = APIRouter()

@router.get('/posts/{post_id}/comments', response_model=List[CommentOut])
async def list_comments(post_id: int):
    return await comment_service.list_comments(post_id)

@router.post('/posts/{post_id}/comments', response_model=CommentOut, status_code=201)
async def add(post_id: int, payload: CommentIn, request: Request):
    return await comment_service.add_comment(post_id, payload, get_client_ip(request))

@router.get('/comments/{comment_id}', response_model=CommentOut)
async def edit_form(comment_id: int):
    return await comment_service.get_comment(comment_id)

@router.put('/comments/{comment_id}', response_model=CommentOut)
async def edit(comment_id: int, payload: CommentUpdateIn):
    return await comment_service.update_comment(comment_id, payload)

@router.delete('/comments/{comment_id}', response_model=ActionOkOut)
async def delete(comment_id: int):
    await comment_service.delete_comment(comment_id)
    return ActionOkOut(message='Comment deleted')
