import csv
import io

import pytest

GOOD_CSV = (
    'category,title,content,author\n'
    'notice,Welcome,"Read the rules, please",admin\n'
    ',Plain post,Hello there,kim\n'
).encode('utf-8')


def csv_upload(data, name='posts.csv'):
    return {'csv_file': (name, data, 'text/csv')}


@pytest.mark.asyncio
async def test_admin_endpoints_need_admin_token(client, user_headers):
    r = await client.post('/api/admin/posts/import', files=csv_upload(GOOD_CSV))
    assert r.status_code == 401
    r = await client.get('/api/admin/posts/export', headers={'Authorization': 'Bearer not-a-jwt'})
    assert r.status_code == 401
    r = await client.get('/api/admin/posts/export', headers=user_headers)
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_import_creates_posts(client, admin_headers):
    r = await client.post('/api/admin/posts/import', files=csv_upload(GOOD_CSV), headers=admin_headers)
    assert r.status_code == 200, r.text
    result = r.json()
    assert result['success_count'] == 2
    assert result['fail_count'] == 0
    assert result['total_count'] == 2
    assert result['has_errors'] is False

    page = (await client.get('/api/posts')).json()
    assert page['total'] == 2
    first, second = page['items']
    assert first['title'] == 'Welcome'
    assert first['category'] == 'notice'
    assert second['category'] == 'free'


@pytest.mark.asyncio
async def test_import_reports_bad_rows(client, admin_headers):
    data = (
        '\ufeffcategory, title ,content,author\n'
        'free,Good row,body,kim\n'
        'free,,body,kim\n'
        '\n'
        'market,Bad category,body,\n'
    ).encode('utf-8')
    r = await client.post('/api/admin/posts/import', files=csv_upload(data), headers=admin_headers)
    result = r.json()
    assert result['success_count'] == 1
    assert result['fail_count'] == 2
    assert result['has_errors'] is True
    assert result['errors'] == [
        'Row 3: Title is required',
        'Row 5: Author is required, Unknown category: market',
    ]


@pytest.mark.asyncio
async def test_import_rejects_bad_files(client, admin_headers):
    r = await client.post('/api/admin/posts/import', headers=admin_headers)
    assert r.status_code == 400

    r = await client.post('/api/admin/posts/import', files=csv_upload(GOOD_CSV, 'posts.xlsx'), headers=admin_headers)
    assert r.status_code == 400
    assert r.json()['detail'] == 'Only CSV files can be imported'

    r = await client.post('/api/admin/posts/import', files=csv_upload(b'title,content\nt,c\n'), headers=admin_headers)
    assert r.status_code == 400
    assert 'category' in r.json()['detail']
    assert 'author' in r.json()['detail']

    r = await client.post('/api/admin/posts/import', files=csv_upload(b'category,title,content,author\n'), headers=admin_headers)
    assert r.status_code == 400
    assert r.json()['detail'] == 'CSV file contains no data'

    r = await client.post('/api/admin/posts/import', files=csv_upload(b'category,title\n\xff\xfe\n'), headers=admin_headers)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_export_empty_board(client, admin_headers):
    r = await client.get('/api/admin/posts/export', headers=admin_headers)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_export_posts(client, admin_headers, make_post):
    first = await make_post(title='Hello, "world"', content='line one\nline two')
    gone = await make_post(title='deleted')
    await client.delete(f"/api/posts/{gone['id']}")
    await client.get(f"/api/posts/{first['id']}")

    r = await client.get('/api/admin/posts/export', headers=admin_headers)
    assert r.status_code == 200
    assert r.headers['content-type'].startswith('text/csv')
    disposition = r.headers['content-disposition']
    assert disposition.startswith('attachment; filename="board_data_')
    assert disposition.endswith('.csv"')
    assert r.content.startswith(b'\xef\xbb\xbf')

    rows = list(csv.reader(io.StringIO(r.content.decode('utf-8-sig'))))
    assert rows[0] == ['id', 'category', 'title', 'content', 'author', 'view_count', 'created_at']
    assert len(rows) == 2
    assert rows[1][:6] == [str(first['id']), 'free', 'Hello, "world"', 'line one\nline two', 'kim', '1']
    assert rows[1][6]


@pytest.mark.asyncio
async def test_import_error_names_first_line_of_multiline_row(client, admin_headers):
    data = (
        'category,title,content,author\n'
        'free,,"spans\nthree\nlines",kim\n'
        'free,,short,kim\n'
    ).encode('utf-8')
    r = await client.post('/api/admin/posts/import', files=csv_upload(data), headers=admin_headers)
    assert r.json()['errors'] == ['Row 2: Title is required', 'Row 5: Title is required']
