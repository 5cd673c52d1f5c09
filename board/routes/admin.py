"""
Admin Routes
Bulk CSV import and export of posts
"""

import csv
import logging

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import Response
from typing import Optional

from ..auth import require_admin
from ..file_storage import get_file_extension
from ..schemas.csv import CsvImportOut
from ..services.csv_service import csv_service
from ..services.posts import post_service, IMPORT_HEADERS, EXPORT_HEADERS
from ..utils import get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter(dependencies=[Depends(require_admin)])


@router.post('/posts/import', response_model=CsvImportOut)
async def import_posts(request: Request, csv_file: Optional[UploadFile] = File(None)):
    """Create posts from an uploaded CSV file with category,title,content,author columns"""
    if csv_file is None or not csv_file.filename:
        raise HTTPException(400, 'Please choose a file to import')
    if get_file_extension(csv_file.filename).lower() != '.csv':
        raise HTTPException(400, 'Only CSV files can be imported')

    logger.info(f'CSV import received: {csv_file.filename}')
    data = await csv_file.read()
    try:
        headers, rows = csv_service.parse_csv(data)
    except (UnicodeDecodeError, csv.Error) as e:
        logger.warning(f'CSV import parse error: {e}')
        raise HTTPException(400, f'Could not read CSV file: {e}')

    missing = csv_service.missing_headers(headers, IMPORT_HEADERS)
    if missing:
        raise HTTPException(
            400,
            f"Invalid CSV header, missing: {', '.join(missing)}. Required: {', '.join(IMPORT_HEADERS)}",
        )
    if not rows:
        raise HTTPException(400, 'CSV file contains no data')

    return await post_service.import_posts(rows, get_client_ip(request))


@router.get('/posts/export')
async def export_posts():
    rows = await post_service.export_rows()
    if not rows:
        raise HTTPException(404, 'No posts to export')
    body = csv_service.export_to_csv(EXPORT_HEADERS, rows)
    file_name = csv_service.generate_file_name('board_data')
    logger.info(f'CSV export finished: {len(rows)} rows')
    return Response(
        content=body,
        media_type='text/csv; charset=utf-8',
        headers={'Content-Disposition': f'attachment; filename="{file_name}"'},
    )
