from fastapi import APIRouter, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import FileResponse
from typing import Optional

from ..schemas.posts import PostCreateIn, PostUpdateIn, PostDetailOut, PostListPage, ReactionOut, ActionOkOut
from ..services.posts import post_service
from ..file_storage import file_storage
from ..utils import get_client_ip

router = APIRouter()


async def _save_upload(upload: Optional[UploadFile]):
    # browsers send an empty part when no file was picked
    if upload is None or not upload.filename:
        return None
    return await file_storage.save_attachment(upload)


@router.get('', response_model=PostListPage)
async def list_posts(category: Optional[str] = None, keyword: Optional[str] = None, offset: int = 0, limit: int = 50):
    return await post_service.list_posts(category, keyword, offset, limit)


@router.post('', response_model=PostDetailOut, status_code=201)
async def create(
    request: Request,
    category: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    upload: Optional[UploadFile] = File(None),
):
    payload = PostCreateIn(category=category, title=title, content=content, author=author)
    errors = payload.validation_errors()
    if errors:
        raise HTTPException(400, errors)
    attachment = await _save_upload(upload)
    try:
        return await post_service.create_post(payload, get_client_ip(request), attachment)
    except Exception:
        if attachment:
            await file_storage.delete_attachment(attachment.file_path)
        raise


@router.get('/{post_id}', response_model=PostDetailOut)
async def detail(post_id: int):
    return await post_service.get_post_detail(post_id)


@router.get('/{post_id}/edit', response_model=PostDetailOut)
async def edit_form(post_id: int):
    return await post_service.get_post_for_edit(post_id)


@router.put('/{post_id}', response_model=PostDetailOut)
async def edit(
    post_id: int,
    category: Optional[str] = Form(None),
    title: Optional[str] = Form(None),
    content: Optional[str] = Form(None),
    author: Optional[str] = Form(None),
    upload: Optional[UploadFile] = File(None),
):
    payload = PostUpdateIn(category=category, title=title, content=content, author=author)
    errors = payload.validation_errors()
    if errors:
        raise HTTPException(400, errors)
    attachment = await _save_upload(upload)
    try:
        return await post_service.update_post(post_id, payload, attachment)
    except Exception:
        if attachment:
            await file_storage.delete_attachment(attachment.file_path)
        raise


@router.delete('/{post_id}', response_model=ActionOkOut)
async def delete(post_id: int):
    await post_service.delete_post(post_id)
    return ActionOkOut(message='Post deleted')


@router.post('/{post_id}/like', response_model=ReactionOut)
async def like(post_id: int):
    return await post_service.react(post_id, 'like')


@router.post('/{post_id}/dislike', response_model=ReactionOut)
async def dislike(post_id: int):
    return await post_service.react(post_id, 'dislike')


@router.get('/{post_id}/attachment')
async def download(post_id: int):
    path, file_name = await post_service.get_attachment(post_id)
    return FileResponse(path, filename=file_name, media_type='application/octet-stream')
