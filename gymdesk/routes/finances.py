from flask import Blueprint, jsonify

from gymdesk.models.finance import Finance
from gymdesk.models.member import Member
from gymdesk.schemas import FinanceCreate, int_arg, parse_body
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import BadRequest, NotFound

finances_bp = Blueprint('finances', __name__)


@finances_bp.route('', methods=['GET'])
@admin_required
@json_endpoint
def list_finances():
    return jsonify([f.to_dict() for f in Finance.get_all()])


@finances_bp.route('', methods=['POST'])
@admin_required
@json_endpoint
def add_finance():
    body = parse_body(FinanceCreate)
    if body.member_id is not None and not Member.exists(body.member_id):
        raise BadRequest('Member not found')
    entry = Finance(
        type=body.type,
        amount=body.amount,
        date=body.date,
        category=body.category,
        description=body.description,
        member_id=body.member_id,
    )
    finance_id = entry.save()
    return jsonify({'success': True, 'id': finance_id}), 201


@finances_bp.route('', methods=['DELETE'])
@admin_required
@json_endpoint
def delete_finance():
    finance_id = int_arg('id', message='Missing ID')
    if not Finance.delete(finance_id):
        raise NotFound('Transaction not found')
    return jsonify({'success': True})
