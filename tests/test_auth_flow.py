REGISTRATION = {
    'firstName': 'Asha',
    'lastName': 'Patel',
    'email': 'asha@example.com',
    'password': 'secret123',
    'confirmPassword': 'secret123',
    'phone': '+919876543210'
}


def register(client, **overrides):
    payload = dict(REGISTRATION, **overrides)
    return client.post('/api/auth/register', json=payload)


def login(client, email='asha@example.com', password='secret123'):
    return client.post('/api/auth/login', json={'email': email, 'password': password})


def test_register_verify_and_login(client, outbox):
    response = register(client)
    assert response.status_code == 201
    body = response.get_json()
    assert body['success'] is True
    assert body['data']['verified'] is False
    assert body['data']['emailSent'] is True

    otp = outbox.last_code('asha@example.com')
    assert otp is not None

    verified = client.post('/api/auth/verify-email', json={'email': 'asha@example.com', 'otp': otp})
    assert verified.status_code == 200
    assert verified.get_json()['data']['verified'] is True

    logged_in = login(client)
    assert logged_in.status_code == 200
    data = logged_in.get_json()['data']
    assert data['token']
    assert data['user']['email'] == 'asha@example.com'
    assert 'password' not in data['user']
    assert data['user']['status'] == 'active'


def test_register_duplicate_email(client):
    register(client)
    response = register(client)
    assert response.status_code == 400
    assert response.get_json()['errorType'] == 'USER_EXISTS'


def test_register_validation_error_shape(client):
    response = register(client, confirmPassword='different')
    assert response.status_code == 400
    body = response.get_json()
    assert body['success'] is False
    assert body['error'] == 'Validation error'
    assert 'Passwords do not match' in body['message']
    assert body['details']


def test_verify_email_wrong_code(client, outbox):
    register(client)
    wrong = '000000' if outbox.last_code('asha@example.com') != '000000' else '111111'
    response = client.post('/api/auth/verify-email', json={'email': 'asha@example.com', 'otp': wrong})
    assert response.status_code == 400
    body = response.get_json()
    assert body['errorType'] == 'INVALID_OTP'
    assert body['details']['attemptsRemaining'] == 2


def test_resend_verification_issues_new_code(client, outbox):
    register(client)
    response = client.post('/api/auth/resend-verification', json={'email': 'asha@example.com'})
    assert response.status_code == 200
    assert len([c for c in outbox.codes if c['to'] == 'asha@example.com']) == 2


def test_login_unknown_email_and_wrong_password(client):
    register(client)
    unknown = login(client, email='nobody@example.com')
    assert unknown.status_code == 404
    assert unknown.get_json()['errorType'] == 'ACCOUNT_NOT_FOUND'

    wrong = login(client, password='not-the-password')
    assert wrong.status_code == 401
    assert wrong.get_json()['errorType'] == 'INVALID_PASSWORD'


def test_forgot_password_does_not_reveal_accounts(client, outbox):
    response = client.post('/api/auth/forgot-password', json={'email': 'nobody@example.com'})
    assert response.status_code == 200
    assert 'If an account with this email exists' in response.get_json()['message']
    assert outbox.codes == []


def test_password_reset_flow(client, outbox):
    register(client)
    client.post('/api/auth/forgot-password', json={'email': 'asha@example.com'})
    otp = outbox.last_code('asha@example.com')

    verified = client.post('/api/auth/verify-reset-otp', json={'email': 'asha@example.com', 'otp': otp})
    assert verified.status_code == 200
    reset_token = verified.get_json()['data']['resetToken']

    reset = client.post('/api/auth/reset-password', json={
        'resetToken': reset_token,
        'newPassword': 'brandnew1',
        'confirmPassword': 'brandnew1'
    })
    assert reset.status_code == 200
    assert outbox.confirmations == ['asha@example.com']

    assert login(client, password='secret123').status_code == 401
    assert login(client, password='brandnew1').status_code == 200

    reused = client.post('/api/auth/reset-password', json={
        'resetToken': reset_token,
        'newPassword': 'another1',
        'confirmPassword': 'another1'
    })
    assert reused.status_code == 400
    assert reused.get_json()['errorType'] == 'INVALID_TOKEN'


def test_reset_password_with_bad_token(client):
    response = client.post('/api/auth/reset-password', json={
        'resetToken': 'bogus',
        'newPassword': 'brandnew1',
        'confirmPassword': 'brandnew1'
    })
    assert response.status_code == 400
    assert response.get_json()['errorType'] == 'INVALID_TOKEN'


def test_verify_token_and_profile(client, make_user):
    user, headers = make_user()

    token_check = client.get('/api/auth/verify-token', headers=headers)
    assert token_check.status_code == 200
    assert token_check.get_json()['data']['userId'] == user.id

    profile = client.get('/api/auth/profile', headers=headers)
    assert profile.get_json()['data']['user']['firstName'] == 'Asha'


def test_profile_update_merges_preferences(client, make_user):
    _, headers = make_user()
    response = client.put('/api/auth/profile', headers=headers, json={
        'firstName': 'Ashaben',
        'profile': {'bio': 'Looking for a home', 'preferences': {'newsletter': False}}
    })
    assert response.status_code == 200
    user = response.get_json()['data']['user']
    assert user['firstName'] == 'Ashaben'
    assert user['lastName'] == 'Patel'
    assert user['profile']['bio'] == 'Looking for a home'
    assert user['profile']['preferences']['newsletter'] is False
    assert user['profile']['preferences']['notifications'] is True


def test_profile_update_rejects_null_names(client, make_user):
    _, headers = make_user()
    response = client.put('/api/auth/profile', headers=headers, json={'firstName': None})
    assert response.status_code == 400
    assert response.get_json()['details'][0]['field'] == 'firstName'

    profile = client.get('/api/auth/profile', headers=headers)
    assert profile.get_json()['data']['user']['firstName'] == 'Asha'


def test_change_password(client, make_user, outbox):
    _, headers = make_user()
    wrong = client.post('/api/auth/change-password', headers=headers, json={
        'currentPassword': 'nope', 'newPassword': 'changed1', 'confirmPassword': 'changed1'
    })
    assert wrong.status_code == 400
    assert wrong.get_json()['errorType'] == 'INVALID_CURRENT_PASSWORD'

    ok = client.post('/api/auth/change-password', headers=headers, json={
        'currentPassword': 'secret123', 'newPassword': 'changed1', 'confirmPassword': 'changed1'
    })
    assert ok.status_code == 200
    assert login(client, password='changed1').status_code == 200
    assert outbox.confirmations == ['asha@example.com']


def test_saved_properties(client, make_user, make_property):
    _, headers = make_user()
    prop = make_property()

    saved = client.post('/api/auth/save-property', headers=headers, json={'propertyId': prop.id})
    assert saved.status_code == 201

    duplicate = client.post('/api/auth/save-property', headers=headers, json={'propertyId': prop.id})
    assert duplicate.status_code == 400
    assert duplicate.get_json()['errorType'] == 'ALREADY_SAVED'

    missing = client.post('/api/auth/save-property', headers=headers, json={'propertyId': 'nope'})
    assert missing.status_code == 404

    assert client.get(f'/api/auth/is-property-saved/{prop.id}', headers=headers).get_json()['data']['isSaved'] is True

    listing = client.get('/api/auth/saved-properties', headers=headers).get_json()['data']
    assert listing['total'] == 1
    assert listing['savedProperties'][0]['property']['title'] == prop.title

    removed = client.delete(f'/api/auth/unsave-property/{prop.id}', headers=headers)
    assert removed.status_code == 200
    again = client.delete(f'/api/auth/unsave-property/{prop.id}', headers=headers)
    assert again.status_code == 404


def test_statistics_cleans_malformed_saved_records(client, make_user, make_property, fake_db):
    user, headers = make_user()
    prop = make_property()
    client.post('/api/auth/save-property', headers=headers, json={'propertyId': prop.id})

    saved = fake_db.collection('savedProperties')
    saved.document('bad-1').set({'userId': user.id, 'propertyId': None, 'savedAt': '2024-01-01T00:00:00'})
    saved.document('bad-2').set({'userId': user.id, 'propertyId': 12, 'savedAt': '2024-01-01T00:00:00'})

    stats = client.get('/api/auth/statistics', headers=headers).get_json()['data']
    assert stats == {'totalSaved': 1, 'totalInquiries': 0}
    assert not saved.document('bad-1').get().exists
    assert not saved.document('bad-2').get().exists

    cleaned = client.post('/api/auth/cleanup-saved-properties', headers=headers)
    assert cleaned.get_json()['data']['cleaned'] == 0


def test_users_profile_routes(client, make_user):
    _, headers = make_user()
    assert client.get('/api/users/profile', headers=headers).status_code == 200
    updated = client.put('/api/users/profile', headers=headers, json={'phone': '+919999999999'})
    assert updated.get_json()['data']['user']['phone'] == '+919999999999'
    assert client.get('/api/users/profile').status_code == 401
