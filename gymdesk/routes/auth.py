import hmac

from flask import Blueprint, current_app, jsonify, request

from gymdesk.models.member import Member
from gymdesk.models.rate_limit import RateLimit
from gymdesk.schemas import LoginRequest, parse_body
from gymdesk.utils.decorators import current_identity, json_endpoint
from gymdesk.utils.errors import BadRequest, TooManyRequests, Unauthorized
from gymdesk.utils.session import issue_admin_token, issue_member_token

auth_bp = Blueprint('auth', __name__)


def _client_ip():
    forwarded = request.headers.get('X-Forwarded-For', '')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.remote_addr or 'unknown'


def _set_session_cookie(response, value, max_age):
    config = current_app.config
    response.set_cookie(
        config['SESSION_COOKIE_NAME'],
        value,
        max_age=max_age,
        path='/',
        httponly=True,
        secure=config['GYM_COOKIE_SECURE'],
        samesite='Strict',
    )
    return response


def member_password(member):
    """Members log in with their phone number followed by their birth year."""
    if member.dob:
        return f"{member.phone}{member.dob.split('-')[0]}"
    return member.phone


@auth_bp.route('/login', methods=['POST'])
@json_endpoint
def login():
    config = current_app.config
    ip = _client_ip()
    if not RateLimit.hit(ip, 'login', config['LOGIN_RATE_LIMIT'], config['LOGIN_RATE_WINDOW_MINUTES']):
        current_app.logger.warning("Login rate limit exceeded for %s", ip)
        raise TooManyRequests(
            f"Too many login attempts. Please wait {config['LOGIN_RATE_WINDOW_MINUTES']} minutes and try again."
        )

    body = parse_body(LoginRequest)

    # Owner login (PIN)
    if body.pin:
        if not current_app.bcrypt.check_password_hash(config['ADMIN_PIN_HASH'], body.pin):
            current_app.logger.info("Failed owner login from %s", ip)
            raise Unauthorized('Invalid PIN Code')
        token = issue_admin_token(config['SESSION_SECRET'])
        response = jsonify({'success': True, 'role': 'admin'})
        current_app.logger.info("Owner logged in from %s", ip)
        return _set_session_cookie(response, token, config['SESSION_MAX_AGE'])

    # Member login (phone + password)
    if body.phone and body.password:
        member = Member.get_by_phone(body.phone)
        if member is None:
            raise Unauthorized('No member found with this phone number')
        if member.status == 'inactive':
            raise Unauthorized('Your membership has been deactivated. Contact the gym owner.')
        if not hmac.compare_digest(body.password.encode('utf-8'), member_password(member).encode('utf-8')):
            raise Unauthorized('Invalid password')

        token = issue_member_token(member.id, member.name, config['SESSION_SECRET'])
        response = jsonify({'success': True, 'role': 'member', 'name': member.name})
        current_app.logger.info("Member %s logged in", member.id)
        return _set_session_cookie(response, token, config['SESSION_MAX_AGE'])

    raise BadRequest('Missing credentials')


@auth_bp.route('/logout', methods=['POST'])
def logout():
    response = jsonify({'success': True})
    return _set_session_cookie(response, '', 0)


@auth_bp.route('/verify', methods=['GET'])
@json_endpoint
def verify():
    """The session guard has already accepted the cookie by the time this runs."""
    identity = current_identity()
    if identity is None:
        raise Unauthorized('Unauthorized: No session')
    return jsonify({'authenticated': True, 'user': identity.to_dict()})
