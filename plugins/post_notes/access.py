"""Write authorization for notes: scoped tokens and edit permission"""
from datetime import datetime, timedelta, timezone
from enum import Enum
import logging

import jwt

from app.auth.permission import Permission
from .errors import AuthorizationError

logger = logging.getLogger(__name__)

BULK_SCOPE = 'note:bulk'
TOKEN_ALGORITHM = 'HS256'
DEFAULT_TOKEN_TTL = 24 * 60 * 60


def note_scope(item_id):
    """Token scope for editing the note of a single item"""
    return f'note:{item_id}'


class WriteState(Enum):
    """Progress of a note write through the access checks"""
    UNAUTHENTICATED = 'unauthenticated'
    TOKEN_CHECKED = 'token_checked'
    PERMISSION_CHECKED = 'permission_checked'
    AUTHORIZED = 'authorized'


class AccessGuard:
    """Issues and checks action-scoped tokens for one caller

    Tokens are signed JWTs bound to a scope and to the caller's id. They
    stay valid until they expire and may be presented more than once.
    """

    def __init__(self, secret_key, caller, ttl=DEFAULT_TOKEN_TTL):
        self.secret_key = secret_key
        self.caller = caller
        self.ttl = ttl
        self.states = []

    @property
    def caller_id(self):
        if not getattr(self.caller, 'is_authenticated', False):
            return None
        return str(self.caller.get_id())

    def issue(self, scope):
        """Create a token for the current caller and scope"""
        now = datetime.now(timezone.utc)
        payload = {
            'scope': scope,
            'sub': self.caller_id or '',
            'iat': now,
            'exp': now + timedelta(seconds=self.ttl),
        }
        return jwt.encode(payload, self.secret_key, algorithm=TOKEN_ALGORITHM)

    def verify(self, scope, token):
        """Check a presented token against the expected scope"""
        if not token or not isinstance(token, str):
            return False

        try:
            payload = jwt.decode(
                token,
                self.secret_key,
                algorithms=[TOKEN_ALGORITHM],
                options={'require': ['exp', 'scope', 'sub']}
            )
        except jwt.ExpiredSignatureError:
            logger.info(f"Expired note token presented for scope {scope}")
            return False
        except jwt.InvalidTokenError:
            return False

        if payload.get('scope') != scope:
            return False

        return payload.get('sub') == (self.caller_id or '')

    def can_edit(self, caller=None):
        """Check the caller may edit notes, independent of any token"""
        caller = caller if caller is not None else self.caller
        if not getattr(caller, 'is_authenticated', False):
            return False
        return caller.has_permission(Permission.EDIT_POSTS)

    def authorize(self, scope, token):
        """Run the checks required before a note write

        Raises AuthorizationError at the first failing check. Nothing is
        written before this returns WriteState.AUTHORIZED. ``states`` holds
        every state the last call reached, in order.
        """
        self.states = [WriteState.UNAUTHENTICATED]

        if not self.verify(scope, token):
            raise AuthorizationError(f"Invalid or missing token for scope {scope}", stage=self.states[-1])
        self.states.append(WriteState.TOKEN_CHECKED)

        if not self.can_edit():
            raise AuthorizationError(f"Caller {self.caller_id} may not edit notes", stage=self.states[-1])
        self.states.append(WriteState.PERMISSION_CHECKED)

        self.states.append(WriteState.AUTHORIZED)
        return self.states[-1]
