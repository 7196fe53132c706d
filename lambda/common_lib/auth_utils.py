import json
import jwt

import request_utils as req

ROLE_CLAIM = 'custom:custom:role'


class CallerIdentity:
    """Authenticated caller as resolved from the request"""

    def __init__(self, user_id=None, role=None):
        self.user_id = user_id
        self.role = role

    def __eq__(self, other):
        return (isinstance(other, CallerIdentity)
                and self.user_id == other.user_id and self.role == other.role)

    def __repr__(self):
        return f"CallerIdentity(user_id={self.user_id!r}, role={self.role!r})"


def extract_token(event):
    auth = req.get_header(event, 'Authorization')
    if not auth or not auth.startswith('Bearer '):
        return None
    return auth.split(' ', 1)[1].strip() or None


def decode_local_token(token):
    """
    Decode a local development token into its claims

    Local tokens are either a JSON document of the form {"claims": {...}}
    or an unsigned JWT. Signatures are never checked here; this path is
    only reachable when the functions run offline.
    """
    if not token:
        return None

    try:
        document = json.loads(token)
    except (json.JSONDecodeError, TypeError):
        document = None

    if isinstance(document, dict):
        claims = document.get('claims', document)
        return claims if isinstance(claims, dict) else None

    try:
        decoded = jwt.decode(token, options={'verify_signature': False})
    except jwt.InvalidTokenError as e:
        print(f"decode_local_token: Invalid token - {str(e)}")
        return None
    return decoded.get('claims', decoded)


def get_caller_claims(event, settings):
    if settings.is_offline:
        return decode_local_token(extract_token(event)) or {}
    return req.get_authorizer_claims(event)


def get_caller_identity(event, settings):
    """
    Resolve the caller's user id and role claim

    Args:
        event (dict): API Gateway proxy event
        settings (Settings): Resolved runtime configuration

    Returns:
        CallerIdentity: user_id and role are None when they cannot be resolved
    """
    try:
        claims = get_caller_claims(event, settings)
        user_id = claims.get('sub')
        role = claims.get(ROLE_CLAIM)
    except (AttributeError, TypeError) as e:
        print(f"get_caller_identity: Unreadable claims - {str(e)}")
        return CallerIdentity()

    if settings.is_offline and not user_id:
        user_id = settings.local_user_id
    return CallerIdentity(user_id=user_id, role=role)
