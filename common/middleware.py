import jwt
import logging
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from .auth_backends import decode_token
from .exceptions import UNAUTHORIZED_MESSAGE, error_envelope

logger = logging.getLogger(__name__)

# Role-specific headers sent by the admin and patient SPAs, checked in order
TOKEN_HEADERS = ('HTTP_ATOKEN', 'HTTP_DTOKEN', 'HTTP_TOKEN')


def extract_token(request):
    """Return the raw role token from the request headers, or None."""
    for header in TOKEN_HEADERS:
        value = request.META.get(header)
        if value:
            return value.strip()

    auth_header = request.META.get('HTTP_AUTHORIZATION', '')
    scheme, _, token = auth_header.partition(' ')
    if scheme.lower() == 'bearer' and token.strip():
        return token.strip()
    return None


class RoleTokenMiddleware(MiddlewareMixin):
    """
    Decode role tokens and attach the principal as ``request.hms_user``.

    Requests without a token pass through anonymously; the DRF permission
    classes decide whether the endpoint needs one. A token that fails
    verification is rejected here with the error envelope.
    """

    # Paths that never look at role tokens
    PUBLIC_PATHS = [
        '/admin',
        '/static/',
        '/media/',
        '/api/docs/',
        '/api/schema/',
        '/api/redoc/',
        '/api/admin/login',
        '/api/doctor/login',
        '/api/user/login',
        '/api/user/register',
    ]

    def process_request(self, request):
        request.hms_user = None

        if any(request.path.startswith(path) for path in self.PUBLIC_PATHS):
            return None

        token = extract_token(request)
        if not token:
            return None

        try:
            request.hms_user = decode_token(token)
        except jwt.InvalidTokenError as exc:
            logger.warning(f"Rejected role token - Path: {request.path}, Reason: {exc}")
            payload, status_code = error_envelope(UNAUTHORIZED_MESSAGE, 'unauthorized', 401)
            return JsonResponse(payload, status=status_code)

        logger.debug(f"Role token accepted - Path: {request.path}, Principal: {request.hms_user}")
        return None
