from trash2trade.models.db import User
from trash2trade.models.enums import Role
from trash2trade.models.schemas import MAX_AMOUNT, MAX_ID


def give_coins(db, user_id, amount):
    with db.session() as session:
        session.query(User).filter_by(id=user_id).update({User.green_coins: amount})


def test_catalog_is_public(client):
    response = client.get('/api/rewards')
    assert response.status_code == 200
    rewards = response.json()['rewards']
    assert rewards[0]['name'] == 'Eco-Friendly Tote Bag'
    assert rewards[0]['green_coins_required'] == 30


def test_redeem_over_http(client, db, auth_headers, make_reward):
    headers, user = auth_headers(Role.CITIZEN)
    reward_id = make_reward(50, name='Bamboo Toothbrush')

    broke = client.post('/api/rewards/redeem', json={'rewardId': reward_id}, headers=headers)
    assert broke.status_code == 400
    assert broke.json() == {'message': 'Not enough GreenCoins to redeem this reward'}

    give_coins(db, user['id'], 80)
    response = client.post('/api/rewards/redeem', json={'rewardId': reward_id}, headers=headers)
    assert response.status_code == 200
    body = response.json()
    assert body['message'] == 'Reward redeemed successfully'
    assert body['userReward']['reward_id'] == reward_id
    assert body['userReward']['status'] == 'pending'

    assert client.get('/api/auth/profile', headers=headers).json()['user']['green_coins'] == 30

    mine = client.get('/api/rewards/my', headers=headers).json()['rewards']
    assert len(mine) == 1
    assert mine[0]['name'] == 'Bamboo Toothbrush'

    assert client.post('/api/rewards/redeem', json={'rewardId': 9999}, headers=headers).status_code == 404
    assert client.post('/api/rewards/redeem', json={}, headers=headers).status_code == 400
    assert client.post('/api/rewards/redeem', json={'rewardId': reward_id}).status_code == 401


def test_payments_over_http(client, auth_headers):
    owner, _ = auth_headers(Role.CITIZEN)
    other, _ = auth_headers(Role.COLLECTOR)

    created = client.post('/api/payments', json={'amount': 499.99, 'paymentMethod': 'card'}, headers=owner)
    assert created.status_code == 201
    payment = created.json()['payment']
    assert created.json()['message'] == 'Payment processed successfully'
    assert payment['status'] == 'completed'
    assert payment['currency'] == 'INR'

    assert client.get(f"/api/payments/{payment['id']}", headers=owner).status_code == 200
    assert client.get(f"/api/payments/{payment['id']}", headers=other).status_code == 403
    assert client.get('/api/payments/777', headers=owner).status_code == 404
    assert [p['id'] for p in client.get('/api/payments', headers=owner).json()['payments']] == [payment['id']]

    assert client.post('/api/payments', json={'amount': -5, 'paymentMethod': 'card'}, headers=owner).status_code == 400
    assert client.post('/api/payments', json={'amount': 5}, headers=owner).status_code == 400


def test_amounts_and_ids_are_bounded(client, auth_headers):
    headers, _ = auth_headers(Role.CITIZEN)

    for amount in (MAX_AMOUNT, 1e12):
        response = client.post('/api/payments', json={'amount': amount, 'paymentMethod': 'card'}, headers=headers)
        assert response.status_code == 400
        assert response.json()['message'].startswith('amount')
    assert client.post(
        '/api/payments', json={'amount': 99999999.5, 'paymentMethod': 'card'}, headers=headers
    ).status_code == 201

    for payment_id in (MAX_ID + 1, 2**63):
        assert client.get(f'/api/payments/{payment_id}', headers=headers).status_code == 400

    redeem = client.post('/api/rewards/redeem', json={'rewardId': 2**63}, headers=headers)
    assert redeem.status_code == 400
