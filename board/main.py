import os
import time
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from .routes import router
from .file_storage import UPLOAD_DIR
from .core import db_startup, init_metrics, check_database, shutdown_connections
import logging
from pythonjsonlogger import jsonlogger

# setup structured logging for the whole package
logger = logging.getLogger('board')
handler = logging.StreamHandler()
formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s')
handler.setFormatter(formatter)
logger.addHandler(handler)
logger.setLevel(os.getenv('LOG_LEVEL', 'INFO').upper())


def get_cors_origins() -> list[str]:
    origins_env = os.getenv('CORS_ALLOW_ORIGINS', '*')
    return [o.strip() for o in origins_env.split(',') if o.strip()]


app = FastAPI(title="Bulletin Board API", version="0.3.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_cors_origins(),
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)

app.include_router(router, prefix="/api")

@app.get('/healthz')
async def healthz():
    db_ok = await check_database()
    return {'status': 'ok' if db_ok else 'degraded', 'database': db_ok}

@app.middleware('http')
async def log_requests(request: Request, call_next):
    logger.info({'msg':'request_start','method':request.method,'path':request.url.path})
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = round((time.perf_counter() - started) * 1000, 1)
    logger.info({'msg':'request_end','path':request.url.path,'status': response.status_code,'ms': elapsed_ms})
    return response

@app.on_event("startup")
async def startup():
    os.makedirs(UPLOAD_DIR, exist_ok=True)
    # Best-effort init, don't block app from starting if a dependency fails
    try:
        await db_startup()
    except Exception as e:
        logger.warning({'msg': 'db_start_failed', 'error': str(e)})
    try:
        init_metrics()
    except Exception as e:
        logger.warning({'msg': 'metrics_init_failed', 'error': str(e)})

@app.on_event("shutdown")
async def shutdown():
    await shutdown_connections()
