from flask import Blueprint, current_app, jsonify, request

from gymdesk.models.member import Member
from gymdesk.models.trainer import Trainer
from gymdesk.schemas import MemberCreate, MemberUpdate, int_arg, parse_body
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import BadRequest, NotFound
from gymdesk.utils.helpers import expiry_for_plan

members_bp = Blueprint('members', __name__)


def _check_trainer(trainer_id):
    if trainer_id is not None and Trainer.get_by_id(trainer_id) is None:
        raise BadRequest('Trainer not found')


@members_bp.route('', methods=['GET'])
@admin_required
@json_endpoint
def list_members():
    """Active members first, then by soonest expiry"""
    return jsonify([m.to_dict() for m in Member.get_all()])


@members_bp.route('', methods=['POST'])
@admin_required
@json_endpoint
def add_member():
    body = parse_body(MemberCreate)
    _check_trainer(body.trainer_id)

    expiry = body.expiry or expiry_for_plan(body.start_date, body.plan_type)
    if expiry is None:
        raise BadRequest('Missing required field: expiry')

    member = Member(
        name=body.name,
        phone=body.phone,
        photo=body.photo,
        height=body.height,
        plan_type=body.plan_type,
        amount=body.amount,
        start_date=body.start_date,
        expiry_date=expiry,
        dob=body.dob,
        trainer_id=body.trainer_id,
        status='active',
    )
    member_id = member.save()
    current_app.logger.info("Member %s added (%s plan)", member_id, body.plan_type)
    return jsonify({'message': 'Member added', 'id': member_id}), 201


@members_bp.route('', methods=['PUT'])
@admin_required
@json_endpoint
def update_member():
    body = parse_body(MemberUpdate)
    member_id = int_arg('id', required=False) or body.id
    if not member_id:
        raise BadRequest('Missing ID')
    _check_trainer(body.trainer_id)

    fields = body.model_dump(exclude={'id'}, exclude_none=True)
    if 'expiry' in fields:
        fields['expiry_date'] = fields.pop('expiry')

    if not Member.update(member_id, fields):
        raise NotFound('Member not found')
    return jsonify({'message': 'Member updated'})


@members_bp.route('', methods=['DELETE'])
@admin_required
@json_endpoint
def delete_member():
    member_id = int_arg('id', message='Missing ID')
    if not Member.delete(member_id):
        raise NotFound('Member not found')
    current_app.logger.info("Member %s deleted", member_id)
    return jsonify({'message': 'Member deleted'})
