from flask import Blueprint, jsonify

from gymdesk.models.measurement import METRICS, Measurement
from gymdesk.models.member import Member
from gymdesk.schemas import MeasurementCreate, int_arg, parse_body
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import NotFound

measurements_bp = Blueprint('measurements', __name__)


@measurements_bp.route('', methods=['GET'])
@admin_required
@json_endpoint
def list_measurements():
    member_id = int_arg('member_id')
    return jsonify([m.to_dict() for m in Measurement.get_by_member(member_id)])


@measurements_bp.route('', methods=['POST'])
@admin_required
@json_endpoint
def add_measurement():
    body = parse_body(MeasurementCreate)
    if not Member.exists(body.member_id):
        raise NotFound('Member not found')
    measurement = Measurement(
        member_id=body.member_id,
        date=body.date,
        **{name: getattr(body, name) for name in METRICS}
    )
    measurement_id = measurement.save()
    return jsonify({'success': True, 'id': measurement_id}), 201
