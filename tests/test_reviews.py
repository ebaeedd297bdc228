COMMENT = 'Very helpful team, found us a flat within two weeks.'


def submit(client, headers, **overrides):
    data = {'rating': 5, 'comment': COMMENT}
    data.update(overrides)
    return client.post('/api/reviews/submit', headers=headers, json=data)


def test_submit_requires_login(client):
    assert client.post('/api/reviews/submit', json={'rating': 5, 'comment': COMMENT}).status_code == 401


def test_submit_validation(client, make_user):
    _, headers = make_user()
    assert submit(client, headers, rating=6).status_code == 400
    short = submit(client, headers, comment='  Nice   ')
    assert short.status_code == 400
    assert 'at least 10 characters' in short.get_json()['message']


def test_submit_is_pending_until_approved(client, admin_headers, make_user):
    user, headers = make_user()
    response = submit(client, headers)
    assert response.status_code == 201
    review = response.get_json()['data']['review']
    assert review['status'] == 'pending'
    assert review['userName'] == 'Asha Patel'
    assert review['userId'] == user.id

    assert client.get('/api/reviews/approved').get_json()['data']['total'] == 0
    assert client.get('/api/reviews/my-reviews', headers=headers).get_json()['data']['total'] == 1

    approved = client.put(f"/api/admin/reviews/{review['id']}/approve", headers=admin_headers)
    assert approved.get_json()['data']['review']['status'] == 'approved'
    assert approved.get_json()['data']['review']['approvedAt'] is not None

    public = client.get('/api/reviews/approved').get_json()['data']
    assert [r['id'] for r in public['reviews']] == [review['id']]


def test_edit_sends_review_back_to_moderation(client, admin_headers, make_user):
    _, headers = make_user()
    review_id = submit(client, headers).get_json()['data']['review']['id']
    client.put(f'/api/admin/reviews/{review_id}/approve', headers=admin_headers)

    edited = client.put(f'/api/reviews/{review_id}', headers=headers, json={'rating': 4})
    assert edited.status_code == 200
    body = edited.get_json()['data']['review']
    assert body['status'] == 'pending'
    assert body['rating'] == 4
    assert body['comment'] == COMMENT

    assert client.get('/api/reviews/approved').get_json()['data']['total'] == 0


def test_only_owner_can_edit_or_delete(client, make_user):
    _, owner = make_user()
    _, other = make_user(email='ravi@example.com', first_name='Ravi', last_name='Mehta')
    review_id = submit(client, owner).get_json()['data']['review']['id']

    assert client.put(f'/api/reviews/{review_id}', headers=other, json={'rating': 1}).status_code == 403
    assert client.delete(f'/api/reviews/{review_id}', headers=other).status_code == 403
    assert client.delete(f'/api/reviews/{review_id}', headers=owner).status_code == 200
    assert client.delete(f'/api/reviews/{review_id}', headers=owner).status_code == 404


def test_admin_moderation(client, admin_headers, make_user):
    _, headers = make_user()
    first = submit(client, headers).get_json()['data']['review']['id']
    second = submit(client, headers, rating=2, comment='Slow to respond to our calls.').get_json()['data']['review']['id']

    rejected = client.put(f'/api/admin/reviews/{second}/reject', headers=admin_headers,
                          json={'reason': 'Not about a listing'})
    assert rejected.get_json()['data']['review']['rejectionReason'] == 'Not about a listing'
    client.put(f'/api/admin/reviews/{first}/approve', headers=admin_headers)

    data = client.get('/api/admin/reviews', headers=admin_headers).get_json()['data']
    assert data['counts'] == {'pending': 0, 'approved': 1, 'rejected': 1, 'total': 2}
    assert len(data['reviews']) == 2

    only_rejected = client.get('/api/admin/reviews?status=rejected', headers=admin_headers).get_json()['data']
    assert [r['id'] for r in only_rejected['reviews']] == [second]

    assert client.delete(f'/api/admin/reviews/{second}', headers=admin_headers).status_code == 200
    assert client.put(f'/api/admin/reviews/{second}/approve', headers=admin_headers).status_code == 404
