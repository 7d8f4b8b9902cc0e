from flask import Blueprint, jsonify

from gymdesk.models.dashboard import get_dashboard
from gymdesk.models.report import build_member_report
from gymdesk.schemas import int_arg
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import NotFound

dashboard_bp = Blueprint('dashboard', __name__)


@dashboard_bp.route('/dashboard', methods=['GET'])
@admin_required
@json_endpoint
def dashboard():
    return jsonify(get_dashboard())


@dashboard_bp.route('/reports', methods=['GET'])
@admin_required
@json_endpoint
def member_report():
    member_id = int_arg('id', message='Member ID required')
    report = build_member_report(member_id)
    if report is None:
        raise NotFound('Member not found')
    return jsonify(report)
