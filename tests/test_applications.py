from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from bazario import db
from bazario.models import SellerApplication
from conftest import make_campaign, register


def application_count(app):
    with app.app_context():
        return SellerApplication.query.count()


def apply(client, seller, campaign_id, message=None):
    return client.post('/api/applications', json={
        'campaign_id': campaign_id,
        'application_message': message
    }, headers=seller['headers'])


# ---------------------- Submission ----------------------

def test_unauthenticated_apply_performs_no_write(app, client, campaign):
    res = client.post(f"/api/campaigns/{campaign['id']}/apply")
    assert res.status_code == 401
    assert res.get_json()['redirect'] == '/auth'

    res = client.post('/api/applications', json={'campaign_id': campaign['id']})
    assert res.status_code == 401
    assert application_count(app) == 0


def test_startup_cannot_apply(app, client, startup, campaign):
    res = client.post(f"/api/campaigns/{campaign['id']}/apply", headers=startup['headers'])
    assert res.status_code == 403
    assert application_count(app) == 0


def test_one_click_apply(client, seller, campaign):
    res = client.post(f"/api/campaigns/{campaign['id']}/apply", headers=seller['headers'])
    assert res.status_code == 201
    data = res.get_json()
    assert data['redirect'] == '/dashboard'
    assert data['application']['status'] == 'pending'
    assert data['application']['application_message'] is None
    assert data['application']['seller_id'] == seller['id']


def test_one_click_duplicate_hits_unique_constraint(app, client, seller, campaign):
    url = f"/api/campaigns/{campaign['id']}/apply"
    assert client.post(url, headers=seller['headers']).status_code == 201

    res = client.post(url, headers=seller['headers'])
    assert res.status_code == 409
    body = res.get_json()
    assert body['code'] == 'already_applied'
    assert 'error' in body
    assert application_count(app) == 1


def test_messaged_apply(client, seller, campaign):
    res = apply(client, seller, campaign['id'], 'I sell locally')
    assert res.status_code == 201
    assert res.get_json()['application']['application_message'] == 'I sell locally'


def test_messaged_apply_rejects_existing_application(app, client, startup, seller, campaign):
    assert apply(client, seller, campaign['id'], 'first').status_code == 201
    application_id = client.get('/api/applications/mine', headers=seller['headers']).get_json()['applications'][0]['id']
    client.post(f'/api/applications/{application_id}/reject', headers=startup['headers'])

    res = apply(client, seller, campaign['id'], 'second try')
    assert res.status_code == 409
    assert res.get_json()['code'] == 'already_applied'
    assert res.get_json()['message'] == 'You have already applied to this campaign.'
    assert application_count(app) == 1


def test_cannot_apply_to_inactive_or_missing_campaign(app, client, startup, seller, campaign):
    client.post(f"/api/campaigns/{campaign['id']}/toggle", headers=startup['headers'])
    assert apply(client, seller, campaign['id']).status_code == 404
    assert apply(client, seller, 'missing').status_code == 404
    assert application_count(app) == 0


def test_apply_requires_campaign_id(client, seller):
    res = client.post('/api/applications', json={}, headers=seller['headers'])
    assert res.status_code == 400
    assert 'campaign_id' in res.get_json()['errors']


def test_seller_sees_own_applications(client, startup, seller, campaign):
    other = make_campaign(client, startup['headers'], title='Organic Cream')
    apply(client, seller, campaign['id'])
    apply(client, seller, other['id'])

    res = client.get('/api/applications/mine', headers=seller['headers'])
    assert res.status_code == 200
    titles = [a['campaign']['title'] for a in res.get_json()['applications']]
    assert titles == ['Organic Cream', 'Eco Bottle']


# ---------------------- Review ----------------------

def test_review_queue_only_lists_owned_campaigns(client, startup, other_startup, seller):
    mine = make_campaign(client, startup['headers'], title='Mine')
    theirs = make_campaign(client, other_startup['headers'], title='Theirs')
    apply(client, seller, mine['id'], 'hello')
    apply(client, seller, theirs['id'], 'hi')

    data = client.get('/api/applications/review', headers=startup['headers']).get_json()
    assert len(data['applications']) == 1
    entry = data['applications'][0]
    assert entry['campaign']['title'] == 'Mine'
    assert entry['seller']['full_name'] == 'Seller'
    assert entry['seller']['city'] == 'Pune'
    assert entry['seller']['bio'] == 'I sell locally'
    assert len(data['pending']) == 1 and data['reviewed'] == []


def test_review_queue_requires_startup(client, seller):
    assert client.get('/api/applications/review').status_code == 401
    assert client.get('/api/applications/review', headers=seller['headers']).status_code == 403


def test_approve_stamps_reviewed_at(app, client, startup, seller, campaign):
    application_id = apply(client, seller, campaign['id']).get_json()['application']['id']

    res = client.post(f'/api/applications/{application_id}/approve', headers=startup['headers'])
    assert res.status_code == 200
    data = res.get_json()
    assert data['application']['status'] == 'approved'
    assert data['application']['reviewed_at'] is not None
    assert data['campaign_stats']['approved_count'] == 1
    assert data['campaign_stats']['pending_count'] == 0

    with app.app_context():
        stored = db.session.get(SellerApplication, application_id)
        assert stored.status == 'approved'
        assert stored.reviewed_at is not None


def test_reviewed_application_cannot_be_reviewed_again(app, client, startup, seller, campaign):
    application_id = apply(client, seller, campaign['id']).get_json()['application']['id']
    first = client.post(f'/api/applications/{application_id}/reject', headers=startup['headers'])
    assert first.status_code == 200
    reviewed_at = first.get_json()['application']['reviewed_at']

    res = client.post(f'/api/applications/{application_id}/approve', headers=startup['headers'])
    assert res.status_code == 409
    assert res.get_json()['code'] == 'already_reviewed'

    with app.app_context():
        stored = db.session.get(SellerApplication, application_id)
        assert stored.status == 'rejected'
        assert stored.reviewed_at.isoformat() == reviewed_at


def test_non_owner_cannot_review(app, client, other_startup, seller, campaign):
    application_id = apply(client, seller, campaign['id']).get_json()['application']['id']

    res = client.post(f'/api/applications/{application_id}/approve', headers=other_startup['headers'])
    assert res.status_code == 403

    with app.app_context():
        stored = db.session.get(SellerApplication, application_id)
        assert stored.status == 'pending'
        assert stored.reviewed_at is None


def test_unknown_review_action_or_application(client, startup, seller, campaign):
    application_id = apply(client, seller, campaign['id']).get_json()['application']['id']
    assert client.post(f'/api/applications/{application_id}/reopen', headers=startup['headers']).status_code == 404
    assert client.post('/api/applications/missing/approve', headers=startup['headers']).status_code == 404


def test_campaign_stats(client, startup, seller):
    campaign = make_campaign(client, startup['headers'], title='Counted')
    second_seller = register(client, 'seller2@example.com', 'seller')
    third_seller = register(client, 'seller3@example.com', 'seller')
    first_id = apply(client, seller, campaign['id']).get_json()['application']['id']
    apply(client, second_seller, campaign['id'])
    third_id = apply(client, third_seller, campaign['id']).get_json()['application']['id']
    client.post(f'/api/applications/{first_id}/approve', headers=startup['headers'])
    client.post(f'/api/applications/{third_id}/reject', headers=startup['headers'])

    res = client.get('/api/applications/stats', headers=startup['headers'])
    assert res.status_code == 200
    stats = res.get_json()['campaigns']
    assert stats == [{
        'id': campaign['id'],
        'title': 'Counted',
        'commission_rate': 15.0,
        'status': 'active',
        'applications_count': 3,
        'approved_count': 1,
        'pending_count': 1,
    }]


def test_owner_review_scenario(client, startup, seller):
    campaign = make_campaign(client, startup['headers'], title='Eco Bottle', commission_rate=15)
    assert campaign['commission_rate'] == 15

    apply(client, seller, campaign['id'], 'I sell locally')

    queue = client.get('/api/applications/review', headers=startup['headers']).get_json()
    assert [a['application_message'] for a in queue['pending']] == ['I sell locally']
    application_id = queue['pending'][0]['id']

    client.post(f'/api/applications/{application_id}/approve', headers=startup['headers'])

    queue = client.get('/api/applications/review', headers=startup['headers']).get_json()
    assert queue['pending'] == []
    assert len(queue['reviewed']) == 1
    assert queue['reviewed'][0]['status'] == 'approved'
    assert queue['reviewed'][0]['reviewed_at'] is not None


def test_review_database_failure_leaves_application_pending(app, client, startup, seller, campaign, monkeypatch):
    application_id = apply(client, seller, campaign['id']).get_json()['application']['id']

    def failing_commit(self):
        raise OperationalError('COMMIT', {}, Exception('db down'))

    monkeypatch.setattr(Session, 'commit', failing_commit)
    res = client.post(f'/api/applications/{application_id}/approve', headers=startup['headers'])
    monkeypatch.undo()

    assert res.status_code == 500
    body = res.get_json()
    assert body['message'] == 'Failed to approve application. Please try again.'
    assert 'db down' in body['error']

    with app.app_context():
        stored = db.session.get(SellerApplication, application_id)
        assert stored.status == 'pending'
        assert stored.reviewed_at is None
