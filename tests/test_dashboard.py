from conftest import make_campaign


def test_dashboard_requires_sign_in(client):
    res = client.get('/api/dashboard')
    assert res.status_code == 401
    assert res.get_json()['redirect'] == '/auth'


def test_startup_dashboard(client, startup, seller):
    delhi = make_campaign(client, startup['headers'], title='Delhi', target_regions=['Delhi', 'Mumbai'])
    make_campaign(client, startup['headers'], title='Chennai', target_regions=['Chennai'])
    application = client.post(f"/api/campaigns/{delhi['id']}/apply", headers=seller['headers']).get_json()
    client.post(f"/api/applications/{application['application']['id']}/approve", headers=startup['headers'])

    res = client.get('/api/dashboard', headers=startup['headers'])
    assert res.status_code == 200
    data = res.get_json()
    assert data['is_startup'] is True
    assert data['profile']['email'] == 'founder@example.com'
    assert data['stats'] == {
        'active_campaigns': 2,
        'partner_sellers': 1,
        'pending_applications': 0,
        'regions_covered': 3,
    }
    assert len(data['recent_activity']) == 1
    assert data['recent_activity'][0]['summary'] == 'Seller applied to Delhi'
    assert any(a['path'] == '/list-product' for a in data['quick_actions'])


def test_seller_dashboard(client, startup, seller):
    first = make_campaign(client, startup['headers'], title='First', commission_rate=10)
    second = make_campaign(client, startup['headers'], title='Second', commission_rate=20)
    make_campaign(client, startup['headers'], title='Third')
    approved = client.post(f"/api/campaigns/{first['id']}/apply", headers=seller['headers']).get_json()
    client.post(f"/api/campaigns/{second['id']}/apply", headers=seller['headers'])
    client.post(f"/api/applications/{approved['application']['id']}/approve", headers=startup['headers'])

    data = client.get('/api/dashboard', headers=seller['headers']).get_json()
    assert data['is_startup'] is False
    assert data['welcome'] == 'Welcome back, Seller!'
    assert data['stats'] == {
        'active_products': 1,
        'pending_applications': 1,
        'total_applications': 2,
        'average_commission_rate': 10.0,
    }
    statuses = sorted(a['status'] for a in data['recent_activity'])
    assert statuses == ['approved', 'pending']
