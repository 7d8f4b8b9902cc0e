# tests/integration/test_collections_api.py
def test_trainer_crud(admin_client):
    resp = admin_client.post('/api/trainers', json={'name': 'Vikram', 'specialty': 'Strength', 'phone': '900'})
    assert resp.status_code == 201
    body = resp.get_json()
    assert body['message'] == 'Trainer added'
    trainer_id = body['id']

    admin_client.post('/api/trainers', json={'name': 'anita'})
    names = [t['name'] for t in admin_client.get('/api/trainers').get_json()]
    assert names == ['anita', 'Vikram']

    resp = admin_client.put(f'/api/trainers?id={trainer_id}', json={'specialty': 'Yoga'})
    assert resp.status_code == 200
    trainer = next(t for t in admin_client.get('/api/trainers').get_json() if t['id'] == trainer_id)
    assert trainer == {'id': trainer_id, 'name': 'Vikram', 'specialty': 'Yoga', 'phone': '900'}

    assert admin_client.delete(f'/api/trainers?id={trainer_id}').get_json() == {'message': 'Trainer deleted'}
    assert len(admin_client.get('/api/trainers').get_json()) == 1


def test_trainer_errors(admin_client):
    assert admin_client.post('/api/trainers', json={'specialty': 'Cardio'}).status_code == 400
    assert admin_client.put('/api/trainers?id=5', json={'name': 'X'}).status_code == 404
    assert admin_client.delete('/api/trainers?id=5').status_code == 404
    resp = admin_client.delete('/api/trainers?id=abc')
    assert resp.status_code == 400
    assert resp.get_json() == {'error': 'Invalid value for id: must be an integer'}


def test_deleting_trainer_unassigns_members(admin_client, make_member):
    trainer_id = admin_client.post('/api/trainers', json={'name': 'Vikram'}).get_json()['id']
    make_member(trainerId=trainer_id)
    assert admin_client.get('/api/members').get_json()[0]['trainerId'] == trainer_id

    assert admin_client.delete(f'/api/trainers?id={trainer_id}').status_code == 200
    assert admin_client.get('/api/members').get_json()[0]['trainerId'] is None


def test_machine_crud(admin_client):
    resp = admin_client.post('/api/machines', json={'name': 'Treadmill', 'lastMaintenance': '2024-05-01'})
    assert resp.status_code == 201
    machine_id = resp.get_json()['id']

    machine = admin_client.get('/api/machines').get_json()[0]
    assert machine == {
        'id': machine_id,
        'name': 'Treadmill',
        'status': 'Operational',
        'lastMaintenance': '2024-05-01',
        'nextMaintenance': None,
    }

    resp = admin_client.put('/api/machines', json={'id': machine_id, 'status': 'Under Maintenance',
                                                   'nextMaintenance': '2024-07-01'})
    assert resp.status_code == 200
    machine = admin_client.get('/api/machines').get_json()[0]
    assert machine['status'] == 'Under Maintenance'
    assert machine['nextMaintenance'] == '2024-07-01'
    assert machine['lastMaintenance'] == '2024-05-01'

    assert admin_client.delete(f'/api/machines?id={machine_id}').status_code == 200
    assert admin_client.get('/api/machines').get_json() == []


def test_machine_status_is_validated(admin_client):
    resp = admin_client.post('/api/machines', json={'name': 'Bike', 'status': 'On fire'})
    assert resp.status_code == 400
    assert resp.get_json()['error'].startswith('Invalid value for status')
    assert admin_client.delete('/api/machines?id=3').status_code == 404
