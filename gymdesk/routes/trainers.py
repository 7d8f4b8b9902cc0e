from flask import Blueprint, jsonify

from gymdesk.models.trainer import Trainer
from gymdesk.schemas import TrainerCreate, TrainerUpdate, int_arg, parse_body
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import BadRequest, NotFound

trainers_bp = Blueprint('trainers', __name__)


@trainers_bp.route('', methods=['GET'])
@admin_required
@json_endpoint
def list_trainers():
    return jsonify([t.to_dict() for t in Trainer.get_all()])


@trainers_bp.route('', methods=['POST'])
@admin_required
@json_endpoint
def add_trainer():
    body = parse_body(TrainerCreate)
    trainer = Trainer(name=body.name, specialty=body.specialty, phone=body.phone)
    trainer_id = trainer.save()
    return jsonify({'id': trainer_id, 'message': 'Trainer added'}), 201


@trainers_bp.route('', methods=['PUT'])
@admin_required
@json_endpoint
def update_trainer():
    body = parse_body(TrainerUpdate)
    trainer_id = int_arg('id', required=False) or body.id
    if not trainer_id:
        raise BadRequest('Missing ID')

    trainer = Trainer.get_by_id(trainer_id)
    if trainer is None:
        raise NotFound('Trainer not found')

    for field in ('name', 'specialty', 'phone'):
        value = getattr(body, field)
        if value is not None:
            setattr(trainer, field, value)
    trainer.save()
    return jsonify({'message': 'Trainer updated'})


@trainers_bp.route('', methods=['DELETE'])
@admin_required
@json_endpoint
def delete_trainer():
    trainer_id = int_arg('id', message='Missing ID')
    if not Trainer.delete(trainer_id):
        raise NotFound('Trainer not found')
    return jsonify({'message': 'Trainer deleted'})
