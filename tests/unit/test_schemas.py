# tests/unit/test_schemas.py
from datetime import date

import pytest
from pydantic import ValidationError

from gymdesk import schemas
from gymdesk.utils.errors import BadRequest


def _message(schema, data):
    with pytest.raises(ValidationError) as excinfo:
        schema.model_validate(data)
    return schemas.describe_validation_error(excinfo.value)


def test_member_create_accepts_camel_case():
    body = schemas.MemberCreate.model_validate({
        'name': 'Asha', 'phone': '99', 'planType': 'Monthly', 'amount': 1000,
        'startDate': '2024-01-01', 'trainerId': '', 'dob': '',
    })
    assert body.plan_type == 'Monthly'
    assert body.start_date == date(2024, 1, 1)
    assert body.trainer_id is None
    assert body.dob is None
    assert body.expiry is None


def test_missing_field_message():
    msg = _message(schemas.MemberCreate, {'name': 'Asha', 'phone': '99', 'amount': 1, 'startDate': '2024-01-01'})
    assert msg == 'Missing required field: planType'


def test_unknown_field_message():
    msg = _message(schemas.TrainerCreate, {'name': 'Ravi', 'salary': 10})
    assert msg == 'Unknown field: salary'


def test_invalid_value_message():
    msg = _message(schemas.MachineCreate, {'name': 'Rower', 'status': 'Exploded'})
    assert msg.startswith('Invalid value for status:')


def test_measurement_keeps_zero_and_drops_blank():
    body = schemas.MeasurementCreate.model_validate({'member_id': 3, 'weight': 0, 'chest': ''})
    assert body.member_id == 3
    assert body.weight == 0
    assert body.chest is None


def test_diet_blank_items_mean_clear():
    body = schemas.DietPlanUpsert.model_validate({'memberId': 1, 'mealType': 'Lunch', 'items': '   '})
    assert body.items_text() is None


def test_diet_rejects_unknown_meal():
    msg = _message(schemas.DietPlanUpsert, {'memberId': 1, 'mealType': 'Brunch', 'items': 'eggs'})
    assert msg.startswith('Invalid value for mealType:')


def test_workout_exercises_text():
    as_list = schemas.WorkoutPlanUpsert.model_validate(
        {'memberId': 1, 'day': 'Monday', 'exercises': [{'name': 'Squat', 'sets': 3}]}
    )
    assert as_list.exercises_text() == '[{"name": "Squat", "sets": 3}]'

    empty = schemas.WorkoutPlanUpsert.model_validate({'memberId': 1, 'day': 'Monday', 'exercises': []})
    assert empty.exercises_text() is None

    text = schemas.WorkoutPlanUpsert.model_validate({'memberId': 1, 'day': 'Friday', 'exercises': 'Rest'})
    assert text.exercises_text() == 'Rest'


def test_blank_chat_message_rejected():
    msg = _message(schemas.PortalChatMessage, {'message': '   '})
    assert msg.startswith('Invalid value for message:')


def test_finance_amount_must_be_positive():
    msg = _message(schemas.FinanceCreate, {'type': 'Income', 'amount': 0})
    assert msg.startswith('Invalid value for amount:')


def test_login_pin_may_be_number():
    assert schemas.LoginRequest.model_validate({'pin': 123456}).pin == '123456'


def test_parse_body_requires_json_object(app):
    with app.test_request_context('/api/trainers', method='POST', json=['not', 'an', 'object']):
        with pytest.raises(BadRequest, match='JSON object'):
            schemas.parse_body(schemas.TrainerCreate)


def test_int_arg(app):
    with app.test_request_context('/api/diet?member_id=12&id=abc'):
        assert schemas.int_arg('member_id') == 12
        assert schemas.int_arg('missing', required=False) is None
        with pytest.raises(BadRequest, match='missing required'):
            schemas.int_arg('missing')
        with pytest.raises(BadRequest, match='Invalid value for id'):
            schemas.int_arg('id')
