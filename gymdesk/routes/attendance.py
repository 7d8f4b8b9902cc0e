from flask import Blueprint, jsonify, request

from gymdesk.models.attendance import Attendance
from gymdesk.models.member import Member
from gymdesk.schemas import AttendanceMark, parse_body
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import BadRequest, NotFound
from gymdesk.utils.helpers import parse_date, today_iso

attendance_bp = Blueprint('attendance', __name__)


@attendance_bp.route('', methods=['GET'])
@admin_required
@json_endpoint
def attendance_for_date():
    """Active members with their status for ?date= (default today)"""
    selected = request.args.get('date')
    if selected:
        parsed = parse_date(selected)
        if parsed is None:
            raise BadRequest('Invalid value for date: expected YYYY-MM-DD')
        selected = parsed.isoformat()
    return jsonify(Attendance.get_roster(selected or today_iso()))


@attendance_bp.route('', methods=['POST'])
@admin_required
@json_endpoint
def mark_attendance():
    body = parse_body(AttendanceMark)
    if not Member.exists(body.member_id):
        raise NotFound('Member not found')
    on_date = body.date.isoformat() if body.date else today_iso()
    Attendance.mark(body.member_id, body.status, on_date)
    return jsonify({'success': True})
