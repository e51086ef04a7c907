import pytest
from bazario import create_app, db
from bazario.config import TestingConfig


# ---------------------- Fixtures ----------------------
@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    with app.test_client() as client_app:
        yield client_app


def register(client, email, user_type, **extra):
    payload = {
        'full_name': extra.pop('full_name', email.split('@')[0].title()),
        'email': email,
        'password': 'secret123',
        'user_type': user_type,
    }
    payload.update(extra)
    res = client.post('/api/auth/register', json=payload)
    assert res.status_code == 201, res.get_json()
    data = res.get_json()
    return {
        'id': data['user']['id'],
        'headers': {'Authorization': f"Bearer {data['access_token']}"},
        'refresh_headers': {'Authorization': f"Bearer {data['refresh_token']}"},
        'user': data['user'],
    }


def make_campaign(client, headers, **overrides):
    payload = {
        'title': 'Eco Bottle',
        'description': 'Reusable steel bottle',
        'commission_rate': 15,
        'target_regions': ['Delhi', 'Mumbai'],
    }
    payload.update(overrides)
    res = client.post('/api/campaigns', json=payload, headers=headers)
    assert res.status_code == 201, res.get_json()
    return res.get_json()['campaign']


@pytest.fixture
def startup(client):
    return register(client, 'founder@example.com', 'startup', company_name='GreenLeaf')


@pytest.fixture
def other_startup(client):
    return register(client, 'rival@example.com', 'startup')


@pytest.fixture
def seller(client):
    return register(client, 'seller@example.com', 'seller', city='Pune', state='Maharashtra',
                    phone='9999999999', bio='I sell locally')


@pytest.fixture
def campaign(client, startup):
    return make_campaign(client, startup['headers'])
