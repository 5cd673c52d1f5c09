import pytest


async def add_comment(client, post_id, **body):
    payload = {'author': 'park', 'content': 'nice post'}
    payload.update(body)
    return await client.post(f'/api/posts/{post_id}/comments', json=payload)


@pytest.mark.asyncio
async def test_add_and_list_comments(client, make_post):
    post = await make_post()
    r = await add_comment(client, post['id'])
    assert r.status_code == 201, r.text
    c = r.json()
    assert c['post_id'] == post['id']
    assert c['parent_id'] is None
    assert c['replies'] == []

    r = await client.get(f"/api/posts/{post['id']}/comments")
    assert [x['id'] for x in r.json()] == [c['id']]


@pytest.mark.asyncio
async def test_replies_nest_one_level(client, make_post):
    post = await make_post()
    root = (await add_comment(client, post['id'], content='root')).json()
    other = (await add_comment(client, post['id'], content='second root')).json()
    reply = (await add_comment(client, post['id'], content='reply', parent_id=root['id'])).json()
    assert reply['parent_id'] == root['id']

    # a reply to a reply hangs off the root
    nested = (await add_comment(client, post['id'], content='deeper', parent_id=reply['id'])).json()
    assert nested['parent_id'] == root['id']

    thread = (await client.get(f"/api/posts/{post['id']}/comments")).json()
    assert [c['id'] for c in thread] == [root['id'], other['id']]
    assert [c['content'] for c in thread[0]['replies']] == ['reply', 'deeper']
    assert thread[1]['replies'] == []

    detail = (await client.get(f"/api/posts/{post['id']}")).json()
    assert detail['comment_count'] == 4
    assert len(detail['comments']) == 2

    listed = (await client.get('/api/posts')).json()['items'][0]
    assert listed['comment_count'] == 4


@pytest.mark.asyncio
async def test_reply_parent_must_belong_to_post(client, make_post):
    first = await make_post(title='first')
    second = await make_post(title='second')
    c = (await add_comment(client, first['id'])).json()

    r = await add_comment(client, second['id'], parent_id=c['id'])
    assert r.status_code == 400
    r = await add_comment(client, first['id'], parent_id=12345)
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_comment_validation(client, make_post):
    post = await make_post()
    r = await client.post(f"/api/posts/{post['id']}/comments", json={'author': '', 'content': ' '})
    assert r.status_code == 400
    assert r.json()['detail'] == ['Author is required', 'Comment content is required']

    r = await add_comment(client, 0)
    assert r.status_code == 400
    assert r.json()['detail'] == ['Invalid post id']

    r = await add_comment(client, 999)
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_comments_on_deleted_post(client, make_post):
    post = await make_post()
    await client.delete(f"/api/posts/{post['id']}")
    assert (await add_comment(client, post['id'])).status_code == 404
    assert (await client.get(f"/api/posts/{post['id']}/comments")).status_code == 404


@pytest.mark.asyncio
async def test_edit_comment(client, make_post):
    post = await make_post()
    c = (await add_comment(client, post['id'])).json()

    r = await client.get(f"/api/comments/{c['id']}")
    assert r.json()['content'] == 'nice post'

    r = await client.put(f"/api/comments/{c['id']}", json={'content': 'changed my mind'})
    assert r.status_code == 200
    assert r.json()['content'] == 'changed my mind'
    assert r.json()['updated_at'] is not None

    r = await client.put(f"/api/comments/{c['id']}", json={'content': ''})
    assert r.status_code == 400
    r = await client.put('/api/comments/999', json={'content': 'x'})
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_delete_comment(client, make_post):
    post = await make_post()
    root = (await add_comment(client, post['id'], content='root')).json()
    reply = (await add_comment(client, post['id'], content='reply', parent_id=root['id'])).json()

    r = await client.delete(f"/api/comments/{root['id']}")
    assert r.status_code == 200
    assert (await client.get(f"/api/comments/{root['id']}")).status_code == 404
    assert (await client.delete(f"/api/comments/{root['id']}")).status_code == 404

    # the orphaned reply stays visible at the top level
    thread = (await client.get(f"/api/posts/{post['id']}/comments")).json()
    assert [c['id'] for c in thread] == [reply['id']]
    assert (await client.get(f"/api/posts/{post['id']}")).json()['comment_count'] == 1


@pytest.mark.asyncio
async def test_reply_to_orphaned_reply_nests_under_it(client, make_post):
    post = await make_post()
    root = (await add_comment(client, post['id'], content='root')).json()
    orphan = (await add_comment(client, post['id'], content='reply', parent_id=root['id'])).json()
    await client.delete(f"/api/comments/{root['id']}")

    r = await add_comment(client, post['id'], content='answer', parent_id=orphan['id'])
    assert r.status_code == 201
    assert r.json()['parent_id'] == orphan['id']

    thread = (await client.get(f"/api/posts/{post['id']}/comments")).json()
    assert [c['id'] for c in thread] == [orphan['id']]
    assert [c['content'] for c in thread[0]['replies']] == ['answer']


@pytest.mark.asyncio
async def test_comments_of_deleted_post_are_gone(client, make_post):
    post = await make_post()
    c = (await add_comment(client, post['id'])).json()
    await client.delete(f"/api/posts/{post['id']}")

    assert (await client.get(f"/api/comments/{c['id']}")).status_code == 404
    assert (await client.put(f"/api/comments/{c['id']}", json={'content': 'x'})).status_code == 404
    assert (await client.delete(f"/api/comments/{c['id']}")).status_code == 404
