"""
Django REST Framework authentication and permission classes for the HMS role tokens.

RoleTokenMiddleware verifies the token and stores the principal on the Django
request; the classes here expose it to DRF and gate actions by role.
"""

from rest_framework import authentication, permissions
import logging

from .auth_backends import ROLE_ADMIN

logger = logging.getLogger(__name__)

# Marker for actions open to anonymous callers
ANYONE = '*'


class RoleTokenAuthentication(authentication.BaseAuthentication):
    """
    DRF authentication class that returns the HMSUser set by RoleTokenMiddleware.
    """

    def authenticate(self, request):
        # Read from the underlying Django request to avoid recursing into request.user
        django_request = request._request if hasattr(request, '_request') else request
        principal = getattr(django_request, 'hms_user', None)
        if principal is None:
            return None
        return (principal, None)

    def authenticate_header(self, request):
        return 'Bearer realm="api"'


def _has_role(request, roles):
    user = request.user
    if not user or not getattr(user, 'is_authenticated', False):
        return False
    return getattr(user, 'role', None) in roles


class RolePermission(permissions.BasePermission):
    """
    Map DRF actions to the roles allowed to call them.

    Views declare ``action_roles`` (action name -> tuple of roles, or ANYONE)
    and optionally ``default_roles`` for actions not listed:

        action_roles = {
            'list': ('admin', 'doctor'),
            'my_admissions': ('user',),
        }
    """

    default_roles = (ROLE_ADMIN,)
    message = 'Unauthorized action'

    def get_roles(self, view):
        action = getattr(view, 'action', None)
        action_roles = getattr(view, 'action_roles', {})
        if action in action_roles:
            return action_roles[action]
        return getattr(view, 'default_roles', self.default_roles)

    def has_permission(self, request, view):
        roles = self.get_roles(view)
        if roles == ANYONE:
            return True

        allowed = _has_role(request, roles)
        if not allowed and getattr(request.user, 'is_authenticated', False):
            logger.warning(
                f"Role '{request.user.role}' denied for {view.__class__.__name__}."
                f"{getattr(view, 'action', None)}"
            )
        return allowed


class IsAuthenticated(permissions.BasePermission):
    """Any verified role token."""

    def has_permission(self, request, view):
        return bool(request.user and getattr(request.user, 'is_authenticated', False))


class IsAdmin(permissions.BasePermission):
    """Admin token only; used by viewsets with no per-action roles."""

    message = 'Unauthorized action'

    def has_permission(self, request, view):
        return _has_role(request, (ROLE_ADMIN,))


class AllowAny(permissions.BasePermission):
    """
    Permission class that allows unrestricted access.
    Use sparingly and only for truly public endpoints.
    """

    def has_permission(self, request, view):
        return True
