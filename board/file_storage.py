"""
File Storage Management for Post Attachments
Handles validation, saving and path resolution for files attached to posts
"""

import os
import uuid
import aiofiles
from fastapi import UploadFile, HTTPException
from PIL import Image
import io
import logging
from typing import Optional

from .schemas.posts import AttachmentInfo
from .utils import format_file_size

logger = logging.getLogger(__name__)

# Configuration
UPLOAD_DIR = os.getenv('UPLOAD_DIR', 'uploads')
PUBLIC_PREFIX = '/uploads'
MAX_FILE_SIZE = int(os.getenv('MAX_UPLOAD_SIZE', str(10 * 1024 * 1024)))  # 10MB
ALLOWED_CONTENT_TYPES = {
    'image/jpeg',
    'image/png',
    'image/gif',
    'application/pdf',
    'application/msword',
    'application/vnd.openxmlformats-officedocument.wordprocessingml.document',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
    'text/plain',
}


def get_file_extension(file_name: Optional[str]) -> str:
    if not file_name:
        return ''
    return os.path.splitext(file_name)[1]


def is_image(content_type: Optional[str]) -> bool:
    return bool(content_type) and content_type.startswith('image/')


class FileStorageManager:
    """Manages attachment uploads and lookups for posts"""

    @staticmethod
    def clean_filename(original_filename: str) -> str:
        """Strip any directory part a client may have sent"""
        name = os.path.basename(original_filename.replace('\\', '/')).strip()
        return name or 'attachment'

    @classmethod
    def generate_filename(cls, original_filename: str) -> str:
        """Unique on-disk name, keeping the original name readable"""
        return f"{uuid.uuid4()}_{cls.clean_filename(original_filename)}"

    @staticmethod
    def get_file_path(filename: str) -> str:
        return os.path.join(UPLOAD_DIR, filename)

    @staticmethod
    def get_public_path(filename: str) -> str:
        return f"{PUBLIC_PREFIX}/{filename}"

    @staticmethod
    def validate_attachment(content: bytes, content_type: Optional[str]) -> None:
        if len(content) > MAX_FILE_SIZE:
            logger.warning(f'Attachment rejected, too large: {len(content)} bytes')
            raise HTTPException(413, f"File too large. Max size is {format_file_size(MAX_FILE_SIZE)}")

        if content_type not in ALLOWED_CONTENT_TYPES:
            logger.warning(f'Attachment rejected, content type not allowed: {content_type}')
            raise HTTPException(400, f"File type not allowed: {content_type}")

        if is_image(content_type):
            try:
                with Image.open(io.BytesIO(content)) as img:
                    img.verify()
            except Exception:
                raise HTTPException(400, "Invalid image file")

    @classmethod
    async def save_attachment(cls, file: UploadFile) -> AttachmentInfo:
        """Validate and store an uploaded file, returning what the post row needs"""
        content = await file.read()
        cls.validate_attachment(content, file.content_type)

        original_name = cls.clean_filename(file.filename or '')
        filename = cls.generate_filename(original_name)
        file_path = cls.get_file_path(filename)

        try:
            os.makedirs(UPLOAD_DIR, exist_ok=True)
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)
        except Exception as e:
            # Clean up file if it was created
            if os.path.exists(file_path):
                os.remove(file_path)
            logger.error(f'Saving attachment {original_name} failed: {e}')
            raise HTTPException(500, f"Error saving file: {str(e)}")

        logger.info(f'Attachment saved: {original_name} -> {file_path}')
        return AttachmentInfo(
            file_name=original_name,
            file_path=cls.get_public_path(filename),
            file_size=len(content),
        )

    @staticmethod
    def resolve_path(public_path: Optional[str]) -> Optional[str]:
        """Map a stored public path back to a file inside UPLOAD_DIR, if it exists"""
        if not public_path:
            return None
        filename = os.path.basename(public_path)
        if not filename:
            return None
        path = os.path.join(UPLOAD_DIR, filename)
        if not os.path.isfile(path):
            return None
        return os.path.abspath(path)

    @staticmethod
    async def delete_attachment(public_path: str) -> bool:
        """Remove a stored attachment from disk"""
        filename = os.path.basename(public_path or '')
        file_path = os.path.join(UPLOAD_DIR, filename)
        if filename and os.path.exists(file_path):
            os.remove(file_path)
            return True
        return False


# Global instance
file_storage = FileStorageManager()
