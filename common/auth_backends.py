"""
Role principals and token issuing/decoding for the three HMS token schemes.

- admin:  bound to the configured ADMIN_EMAIL + ADMIN_PASSWORD. Changing the
  credential invalidates every admin token; there is no per-session revocation.
- doctor: carries the doctor's primary key.
- user:   carries the patient's primary key.
"""
import hashlib
import logging

import jwt
from django.conf import settings
from django.utils import timezone

logger = logging.getLogger(__name__)

ROLE_ADMIN = 'admin'
ROLE_DOCTOR = 'doctor'
ROLE_PATIENT = 'user'
ROLES = (ROLE_ADMIN, ROLE_DOCTOR, ROLE_PATIENT)


class HMSUser:
    """
    Non-database user built from a verified role token.

    Mirrors the parts of Django's user interface DRF and the permission
    classes look at (``is_authenticated``, ``pk``).
    """

    is_authenticated = True
    is_anonymous = False

    def __init__(self, role, user_id=None):
        self.role = role
        self.id = user_id
        self.pk = user_id

    def __str__(self):
        if self.id is None:
            return self.role
        return f"{self.role}:{self.id}"


def admin_credential_digest():
    """Digest of the configured admin credential embedded in admin tokens."""
    raw = f"{settings.ADMIN_EMAIL}{settings.ADMIN_PASSWORD}"
    return hashlib.sha256(raw.encode('utf-8')).hexdigest()


def issue_token(role, user_id=None):
    """Sign a role token. Tokens carry no expiry."""
    if role not in ROLES:
        raise ValueError(f"Unknown role '{role}'")

    payload = {'role': role, 'iat': int(timezone.now().timestamp())}
    if role == ROLE_ADMIN:
        payload['credential'] = admin_credential_digest()
    else:
        payload['id'] = user_id

    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token):
    """
    Verify a role token and return the matching HMSUser.

    Raises jwt.InvalidTokenError for bad signatures, unknown roles, missing
    ids and admin tokens issued for a different credential.
    """
    payload = jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        leeway=settings.JWT_LEEWAY,
        options={'verify_iat': False},
    )

    role = payload.get('role')
    if role not in ROLES:
        raise jwt.InvalidTokenError(f"Unknown role '{role}'")

    if role == ROLE_ADMIN:
        if payload.get('credential') != admin_credential_digest():
            raise jwt.InvalidTokenError('Admin credential mismatch')
        return HMSUser(ROLE_ADMIN)

    user_id = payload.get('id')
    if user_id is None:
        raise jwt.InvalidTokenError('Token has no subject id')
    return HMSUser(role, user_id)
