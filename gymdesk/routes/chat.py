from flask import Blueprint, jsonify

from gymdesk.models.chat import ChatMessage
from gymdesk.models.member import Member
from gymdesk.schemas import ChatReply, int_arg, parse_body
from gymdesk.utils.decorators import admin_required, json_endpoint
from gymdesk.utils.errors import NotFound

chat_bp = Blueprint('chat', __name__)


@chat_bp.route('', methods=['GET'])
@admin_required
@json_endpoint
def conversations():
    """Conversation list, or one member's history with ?member_id="""
    member_id = int_arg('member_id', required=False)
    if member_id is None:
        return jsonify(ChatMessage.get_conversation_list())
    return jsonify([m.to_dict() for m in ChatMessage.get_conversation(member_id)])


@chat_bp.route('', methods=['POST'])
@admin_required
@json_endpoint
def reply():
    body = parse_body(ChatReply)
    if not Member.exists(body.member_id):
        raise NotFound('Member not found')
    message = ChatMessage(member_id=body.member_id, sender='owner', message=body.message)
    message.save()
    return jsonify({'success': True})
