import os
import sys
import tempfile
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Configure test environment before the package reads it at import time
TEST_DIR = tempfile.mkdtemp(prefix='board-tests-')
os.environ['DATABASE_URL'] = f"sqlite+aiosqlite:///{os.path.join(TEST_DIR, 'board.db')}"
os.environ['UPLOAD_DIR'] = os.path.join(TEST_DIR, 'uploads')
os.environ['JWT_SECRET'] = 'test-secret'
os.environ.setdefault('LOG_LEVEL', 'WARNING')

# Ensure the project root is on sys.path when pytest changes CWD to this tests dir
HERE = Path(__file__).resolve()
PKG_ROOT = HERE.parents[2]
if str(PKG_ROOT) not in sys.path:
    sys.path.insert(0, str(PKG_ROOT))

from board.main import app  # noqa: E402
from board.models import engine, Base  # noqa: E402
from board.auth import create_access_token, create_admin_token  # noqa: E402


@pytest_asyncio.fixture
async def fresh_db():
    """Recreate the schema so the test starts from empty tables"""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    yield
    await engine.dispose()


@pytest_asyncio.fixture
async def client(fresh_db):
    async with AsyncClient(transport=ASGITransport(app=app), base_url='http://test') as ac:
        yield ac


@pytest.fixture
def admin_headers():
    return {'Authorization': f'Bearer {create_admin_token("tester")}'}


@pytest.fixture
def user_headers():
    return {'Authorization': f'Bearer {create_access_token({"sub": "someone", "role": "user"})}'}


@pytest.fixture
def upload_dir():
    return os.environ['UPLOAD_DIR']


@pytest.fixture
def make_post(client):
    async def _make(**fields):
        data = {'category': 'free', 'title': 'Hello', 'content': 'First post', 'author': 'kim'}
        data.update(fields)
        files = data.pop('files', None)
        r = await client.post('/api/posts', data=data, files=files)
        assert r.status_code == 201, r.text
        return r.json()
    return _make
