# tests/integration/test_portal_api.py
from gymdesk.models.attendance import Attendance


def test_profile_includes_trainer_name(admin_client, member_client):
    trainer_id = admin_client.post('/api/trainers', json={'name': 'Vikram'}).get_json()['id']
    admin_client.put(f'/api/members?id={member_client.member_id}', json={'trainerId': trainer_id})

    profile = member_client.get('/api/portal/profile').get_json()
    assert profile['id'] == member_client.member_id
    assert profile['name'] == 'Portal Member'
    assert profile['trainerName'] == 'Vikram'
    assert profile['trainerId'] == trainer_id


def test_portal_shows_only_own_records(admin_client, make_member, member_client):
    me = member_client.member_id
    other = make_member(name='Someone Else', phone='5550001')
    for member_id in (me, other):
        admin_client.post('/api/attendance', json={'memberId': member_id, 'status': 'present',
                                                   'date': '2024-06-01'})
        admin_client.post('/api/diet', json={'memberId': member_id, 'mealType': 'Lunch',
                                             'items': f'plan for {member_id}'})
        admin_client.post('/api/workouts', json={'memberId': member_id, 'day': 'Monday',
                                                 'exercises': [f'squat {member_id}']})
        admin_client.post('/api/chat', json={'memberId': member_id, 'message': f'hello {member_id}'})

    attendance = member_client.get('/api/portal/attendance').get_json()
    assert len(attendance) == 1
    assert attendance[0]['date'] == '2024-06-01'
    assert attendance[0]['status'] == 'present'

    diet = member_client.get('/api/portal/diet').get_json()
    assert [d['items'] for d in diet] == [f'plan for {me}']
    assert 'member_id' not in diet[0]

    workouts = member_client.get('/api/portal/workouts').get_json()
    assert [w['exercises'] for w in workouts] == [[f'squat {me}']]

    chat = member_client.get('/api/portal/chat').get_json()
    assert [c['message'] for c in chat] == [f'hello {me}']


def test_portal_ignores_member_id_in_query(admin_client, make_member, member_client):
    other = make_member(name='Someone Else', phone='5550001')
    admin_client.post('/api/diet', json={'memberId': other, 'mealType': 'Lunch', 'items': 'secret'})
    assert member_client.get(f'/api/portal/diet?member_id={other}').get_json() == []


def test_portal_attendance_is_capped(app, member_client):
    with app.app_context():
        for day in range(1, 101):
            Attendance.mark(member_client.member_id, 'present', f'2024-{(day - 1) // 28 + 1:02d}-'
                                                                f'{(day - 1) % 28 + 1:02d}')
    history = member_client.get('/api/portal/attendance').get_json()
    assert len(history) == 90
    assert history[0]['date'] == '2024-04-16'


def test_payments_match_link_and_legacy_tag(app, admin_client, member_client):
    me = member_client.member_id
    other = me + 10
    admin_client.post('/api/finances', json={'type': 'Income', 'amount': 100, 'date': '2024-06-01',
                                             'memberId': me})
    admin_client.post('/api/finances', json={'type': 'Income', 'amount': 200, 'date': '2024-05-01',
                                             'description': f'Renewal member:{me}'})
    admin_client.post('/api/finances', json={'type': 'Income', 'amount': 300, 'date': '2024-04-01',
                                             'description': f'Renewal member:{other}'})
    admin_client.post('/api/finances', json={'type': 'Income', 'amount': 400, 'date': '2024-03-01',
                                             'description': f'member:{me} (cash)'})

    payments = member_client.get('/api/portal/payments').get_json()
    assert [p['amount'] for p in payments] == [100, 200, 400]
    assert 'memberId' not in payments[0]


def test_portal_rejects_deleted_member(admin_client, member_client):
    admin_client.delete(f'/api/members?id={member_client.member_id}')
    assert member_client.get('/api/portal/profile').status_code == 404
    assert member_client.post('/api/portal/chat', json={'message': 'Anyone?'}).status_code == 404
