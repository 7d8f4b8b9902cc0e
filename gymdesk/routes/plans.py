"""Per-member diet and workout plans.

Both collections are keyed by (member, slot): a POST for an existing slot
replaces it and a POST with nothing in it clears the slot.
"""
from flask import Blueprint, jsonify

from gymdesk.models.diet import DietPlan
from gymdesk.models.member import Member
from gymdesk.models.workout_plan import WorkoutPlan
from gymdesk.schemas import DietPlanUpsert, WorkoutPlanUpsert, int_arg, parse_body
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import BadRequest, NotFound

plans_bp = Blueprint('plans', __name__)


def _require_member(member_id):
    if not Member.exists(member_id):
        raise NotFound('Member not found')


def _delete_target():
    plan_id = int_arg('id', required=False)
    member_id = int_arg('member_id', required=False)
    if plan_id is None and member_id is None:
        raise BadRequest('id or member_id required')
    return plan_id, member_id


# ---------------------------
# Diet
# ---------------------------
@plans_bp.route('/diet', methods=['GET'])
@admin_required
@json_endpoint
def list_diet():
    member_id = int_arg('member_id')
    return jsonify([p.to_dict() for p in DietPlan.get_by_member(member_id)])


@plans_bp.route('/diet', methods=['POST'])
@admin_required
@json_endpoint
def save_diet():
    body = parse_body(DietPlanUpsert)
    _require_member(body.member_id)
    DietPlan.upsert(body.member_id, body.meal_type, body.items_text())
    return jsonify({'success': True})


@plans_bp.route('/diet', methods=['DELETE'])
@admin_required
@json_endpoint
def delete_diet():
    plan_id, member_id = _delete_target()
    DietPlan.delete(plan_id=plan_id, member_id=member_id)
    return jsonify({'success': True})


# ---------------------------
# Workouts
# ---------------------------
@plans_bp.route('/workouts', methods=['GET'])
@admin_required
@json_endpoint
def list_workouts():
    member_id = int_arg('member_id')
    return jsonify([p.to_dict() for p in WorkoutPlan.get_by_member(member_id)])


@plans_bp.route('/workouts', methods=['POST'])
@admin_required
@json_endpoint
def save_workout():
    body = parse_body(WorkoutPlanUpsert)
    _require_member(body.member_id)
    WorkoutPlan.upsert(body.member_id, body.day, body.exercises_text())
    return jsonify({'success': True})


@plans_bp.route('/workouts', methods=['DELETE'])
@admin_required
@json_endpoint
def delete_workout():
    plan_id, member_id = _delete_target()
    WorkoutPlan.delete(plan_id=plan_id, member_id=member_id)
    return jsonify({'success': True})
