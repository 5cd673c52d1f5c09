import os
import asyncio
from prometheus_client import Counter, start_http_server
from sqlalchemy import text
import logging

from .models import engine, Base

logger = logging.getLogger(__name__)

DB_CREATE_ALL = os.getenv('DB_CREATE_ALL', '1') == '1'

POSTS_CREATED = Counter('board_posts_created_total', 'Posts created through the form or CSV import')
COMMENTS_CREATED = Counter('board_comments_created_total', 'Comments and replies created')
CSV_ROWS_IMPORTED = Counter('board_csv_rows_imported_total', 'CSV rows processed by import', ['result'])

def init_metrics(port: int | None = None):
    """Initialize Prometheus metrics server"""
    if port is None:
        port = int(os.getenv('METRICS_PORT', '0') or 0)
    if not port:
        logger.info("Prometheus metrics server disabled (METRICS_PORT not set)")
        return
    try:
        start_http_server(port)
        logger.info(f"Prometheus metrics server started on port {port}")
    except Exception as e:
        logger.warning(f'Prometheus start failed: {e}')

async def check_database() -> bool:
    try:
        async with engine.connect() as conn:
            await conn.execute(text('SELECT 1'))
        return True
    except Exception as e:
        logger.warning(f'Database check failed: {e}')
        return False

async def init_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

async def db_startup():
    """Wait for the database with retries and create tables when enabled"""
    max_retries = int(os.getenv('DB_STARTUP_RETRIES', '3'))
    retry_delay = 3  # seconds

    for attempt in range(max_retries):
        logger.info(f"Attempting to connect to database (attempt {attempt + 1}/{max_retries})")
        if await check_database():
            logger.info("Database connected successfully")
            if DB_CREATE_ALL:
                await init_db()
                logger.info("Database tables ensured")
            return True
        if attempt < max_retries - 1:
            logger.info(f"Retrying database connection in {retry_delay} seconds...")
            await asyncio.sleep(retry_delay)
    logger.error("Failed to connect to database after all retries")
    return False

async def shutdown_connections():
    """Gracefully shutdown all connections"""
    logger.info("Shutting down connections...")
    try:
        await engine.dispose()
        logger.info("Database pool disposed")
    except Exception as e:
        logger.error(f"Error disposing database pool: {e}")
