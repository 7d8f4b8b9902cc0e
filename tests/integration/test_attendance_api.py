# tests/integration/test_attendance_api.py
from datetime import date


def test_roster_lists_active_members_without_marks(admin_client, make_member):
    member_id = make_member()
    roster = admin_client.get('/api/attendance?date=2024-06-01').get_json()
    assert roster == [{
        'member_id': member_id,
        'status': None,
        'date': None,
        'name': 'Asha Rao',
        'photo': None,
    }]


def test_marking_twice_keeps_one_row(admin_client, make_member):
    member_id = make_member()
    for status in ('present', 'absent'):
        resp = admin_client.post('/api/attendance', json={'memberId': member_id, 'status': status,
                                                          'date': '2024-06-01'})
        assert resp.status_code == 200
        assert resp.get_json() == {'success': True}

    roster = admin_client.get('/api/attendance?date=2024-06-01').get_json()
    assert len(roster) == 1
    assert roster[0]['status'] == 'absent'
    assert roster[0]['date'] == '2024-06-01'

    # Other days are untouched
    assert admin_client.get('/api/attendance?date=2024-06-02').get_json()[0]['status'] is None


def test_mark_defaults_to_today(admin_client, make_member):
    member_id = make_member()
    admin_client.post('/api/attendance', json={'member_id': member_id, 'status': 'present'})
    roster = admin_client.get('/api/attendance').get_json()
    assert roster[0]['status'] == 'present'
    assert roster[0]['date'] == date.today().isoformat()


def test_inactive_members_are_not_on_the_roster(admin_client, make_member):
    member_id = make_member()
    admin_client.put(f'/api/members?id={member_id}', json={'status': 'inactive'})
    assert admin_client.get('/api/attendance').get_json() == []


def test_lapsed_members_are_not_on_the_roster(admin_client, make_member):
    current = make_member(name='Current', phone='1')
    make_member(name='Lapsed', phone='2', startDate='1999-12-01', expiry='2000-01-01')
    roster = admin_client.get('/api/attendance?date=2024-06-01').get_json()
    assert [r['member_id'] for r in roster] == [current]


def test_attendance_errors(admin_client, make_member):
    assert admin_client.get('/api/attendance?date=yesterday').status_code == 400

    resp = admin_client.post('/api/attendance', json={'memberId': 99, 'status': 'present'})
    assert resp.status_code == 404

    member_id = make_member()
    resp = admin_client.post('/api/attendance', json={'memberId': member_id, 'status': 'late'})
    assert resp.status_code == 400
