"""Session token codec.

A token is ``base64(payload) + "." + hex(hmac_sha256(secret, base64(payload)))``
where the payload is one of::

    admin:<timestamp_ms>
    admin:<pin>:<timestamp_ms>          (legacy form, PIN must match)
    member:<id>:<name>:<timestamp_ms>

Unsigned tokens (just the base64 part) are only accepted when the caller
allows legacy sessions.
"""
import base64
import binascii
import hashlib
import hmac
import time

ONE_DAY_MS = 24 * 60 * 60 * 1000


class SessionError(Exception):
    pass


class SessionIdentity:
    def __init__(self, role, issued_at, member_id=None, member_name=None):
        self.role = role
        self.issued_at = issued_at
        self.member_id = member_id
        self.member_name = member_name

    @property
    def is_admin(self):
        return self.role == 'admin'

    @property
    def is_member(self):
        return self.role == 'member'

    def to_dict(self):
        if self.is_member:
            return {'id': self.member_id, 'name': self.member_name, 'role': 'member'}
        return {'name': 'Owner', 'role': 'admin'}

    def __repr__(self):
        return f"<SessionIdentity role={self.role} member_id={self.member_id}>"


def now_ms():
    return int(time.time() * 1000)


def _sign(data_b64, secret):
    return hmac.new(secret.encode('utf-8'), data_b64.encode('ascii'), hashlib.sha256).hexdigest()


def sign_payload(payload, secret):
    data_b64 = base64.b64encode(payload.encode('utf-8')).decode('ascii')
    return f"{data_b64}.{_sign(data_b64, secret)}"


def issue_admin_token(secret, issued_at=None):
    issued_at = now_ms() if issued_at is None else issued_at
    return sign_payload(f"admin:{issued_at}", secret)


def issue_member_token(member_id, name, secret, issued_at=None):
    issued_at = now_ms() if issued_at is None else issued_at
    return sign_payload(f"member:{member_id}:{name}:{issued_at}", secret)


def _b64decode(data_b64):
    try:
        return base64.b64decode(data_b64.encode('ascii'), validate=True).decode('utf-8')
    except (binascii.Error, UnicodeError, ValueError):
        raise SessionError('Malformed session')


def decode_token(raw, secret, admin_pin=None, allow_legacy=False, now=None, max_age_ms=ONE_DAY_MS):
    """Validate a raw cookie value and return a SessionIdentity.

    Raises SessionError with a client-facing message on any failure.
    """
    if not raw:
        raise SessionError('No session')

    if '.' in raw:
        data_b64, _, signature = raw.rpartition('.')
        if not data_b64.isascii() or not hmac.compare_digest(
            signature.encode('utf-8'), _sign(data_b64, secret).encode('ascii')
        ):
            raise SessionError('Invalid or tampered session')
        decoded = _b64decode(data_b64)
    elif allow_legacy:
        decoded = _b64decode(raw)
    else:
        raise SessionError('Unsigned session')

    parts = decoded.split(':')
    if len(parts) < 2:
        raise SessionError('Malformed session')

    role = parts[0]
    try:
        issued_at = int(parts[-1])
    except ValueError:
        raise SessionError('Session expired')

    now = now_ms() if now is None else now
    if now - issued_at > max_age_ms:
        raise SessionError('Session expired')

    if role == 'admin':
        if len(parts) == 3:
            if admin_pin is None or not hmac.compare_digest(
                parts[1].encode('utf-8'), str(admin_pin).encode('utf-8')
            ):
                raise SessionError('Invalid session')
        elif len(parts) != 2:
            raise SessionError('Malformed session')
        return SessionIdentity('admin', issued_at)

    if role == 'member':
        if len(parts) < 4:
            raise SessionError('Invalid member session')
        try:
            member_id = int(parts[1])
        except ValueError:
            raise SessionError('Invalid member session')
        if member_id <= 0:
            raise SessionError('Invalid member session')
        # Names may themselves contain ':'
        name = ':'.join(parts[2:-1])
        return SessionIdentity('member', issued_at, member_id=member_id, member_name=name)

    raise SessionError('Unknown role')
