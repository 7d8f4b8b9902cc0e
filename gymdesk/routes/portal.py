"""Member portal.

The member id always comes from the session, never from the request, so a
member can only ever see their own data.
"""
from flask import Blueprint, jsonify

from gymdesk.models.attendance import Attendance
from gymdesk.models.chat import ChatMessage
from gymdesk.models.diet import DietPlan
from gymdesk.models.finance import Finance
from gymdesk.models.member import Member
from gymdesk.models.workout_plan import WorkoutPlan
from gymdesk.schemas import PortalChatMessage, parse_body
from gymdesk.utils.decorators import current_identity, json_endpoint, member_required
from gymdesk.utils.errors import NotFound

portal_bp = Blueprint('portal', __name__)


def _member_id():
    return current_identity().member_id


@portal_bp.route('/profile', methods=['GET'])
@member_required
@json_endpoint
def profile():
    member = Member.get_by_id(_member_id())
    if member is None:
        raise NotFound('Member not found')
    return jsonify(member.to_profile_dict())


@portal_bp.route('/attendance', methods=['GET'])
@member_required
@json_endpoint
def my_attendance():
    return jsonify([a.to_dict() for a in Attendance.get_member_history(_member_id())])


@portal_bp.route('/diet', methods=['GET'])
@member_required
@json_endpoint
def my_diet():
    plans = DietPlan.get_by_member(_member_id())
    return jsonify([
        {'id': p.id, 'meal_type': p.meal_type, 'items': p.items, 'created_at': p.created_at}
        for p in plans
    ])


@portal_bp.route('/workouts', methods=['GET'])
@member_required
@json_endpoint
def my_workouts():
    plans = WorkoutPlan.get_by_member(_member_id())
    return jsonify([
        {'id': p.id, 'day': p.day, 'exercises': p.exercises, 'created_at': p.created_at}
        for p in plans
    ])


@portal_bp.route('/payments', methods=['GET'])
@member_required
@json_endpoint
def my_payments():
    payments = Finance.get_member_payments(_member_id())
    return jsonify([
        {
            'id': f.id, 'type': f.type, 'amount': f.amount, 'date': f.date,
            'category': f.category, 'description': f.description,
        }
        for f in payments
    ])


@portal_bp.route('/chat', methods=['GET'])
@member_required
@json_endpoint
def my_chat():
    return jsonify([m.to_dict() for m in ChatMessage.get_conversation(_member_id())])


@portal_bp.route('/chat', methods=['POST'])
@member_required
@json_endpoint
def send_message():
    body = parse_body(PortalChatMessage)
    if not Member.exists(_member_id()):
        raise NotFound('Member not found')
    message = ChatMessage(member_id=_member_id(), sender='member', message=body.message)
    message.save()
    return jsonify({'success': True})
