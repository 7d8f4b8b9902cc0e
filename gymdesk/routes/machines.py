from flask import Blueprint, jsonify

from gymdesk.models.machine import Machine
from gymdesk.schemas import MachineCreate, MachineUpdate, int_arg, parse_body
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import BadRequest, NotFound

machines_bp = Blueprint('machines', __name__)


@machines_bp.route('', methods=['GET'])
@admin_required
@json_endpoint
def list_machines():
    return jsonify([m.to_dict() for m in Machine.get_all()])


@machines_bp.route('', methods=['POST'])
@admin_required
@json_endpoint
def add_machine():
    body = parse_body(MachineCreate)
    machine = Machine(
        name=body.name,
        status=body.status,
        last_maintenance=body.last_maintenance,
        next_maintenance=body.next_maintenance,
    )
    machine_id = machine.save()
    return jsonify({'id': machine_id, 'message': 'Machine added'}), 201


@machines_bp.route('', methods=['PUT'])
@admin_required
@json_endpoint
def update_machine():
    body = parse_body(MachineUpdate)
    machine_id = int_arg('id', required=False) or body.id
    if not machine_id:
        raise BadRequest('Missing ID')

    machine = Machine.get_by_id(machine_id)
    if machine is None:
        raise NotFound('Machine not found')

    for field in ('name', 'status', 'last_maintenance', 'next_maintenance'):
        value = getattr(body, field)
        if value is not None:
            setattr(machine, field, value)
    machine.save()
    return jsonify({'message': 'Machine updated'})


@machines_bp.route('', methods=['DELETE'])
@admin_required
@json_endpoint
def delete_machine():
    machine_id = int_arg('id', message='Missing ID')
    if not Machine.delete(machine_id):
        raise NotFound('Machine not found')
    return jsonify({'message': 'Machine deleted'})
