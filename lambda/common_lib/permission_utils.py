"""
Permission and authorization utilities for Lambda functions
Centralizes role and ownership checks across the application
"""

from exceptions import AuthenticationError, AuthorizationError

ADMIN = 'admin'
VIEWER = 'viewer'

PRODUCT_READ_ROLES = frozenset({ADMIN, VIEWER})
PRODUCT_WRITE_ROLES = frozenset({ADMIN})
ORDER_STATUS_ROLES = frozenset({ADMIN})


def is_allowed(caller_role, allowed_roles):
    """Return True if the caller's role is one of the allowed roles"""
    if not isinstance(caller_role, str):
        return False
    return caller_role in allowed_roles


class PermissionValidator:
    """Handles common permission validation patterns"""

    @staticmethod
    def require_role(identity, allowed_roles):
        """
        Raise AuthorizationError unless the caller holds one of the roles

        Args:
            identity (CallerIdentity): Resolved caller
            allowed_roles (iterable): Roles that may perform the operation
        """
        if not is_allowed(identity.role, allowed_roles):
            print(f"require_role: role {identity.role!r} not in {sorted(allowed_roles)}")
            raise AuthorizationError()

    @staticmethod
    def require_user(identity):
        """Raise AuthenticationError when no user id was resolved; returns the user id"""
        if not identity.user_id:
            raise AuthenticationError()
        return identity.user_id

    @staticmethod
    def check_ownership(resource, user_id, owner_field='userId'):
        """
        Ensure the resource belongs to the user

        Raises:
            AuthorizationError: If the owner does not match
        """
        if resource.get(owner_field) != user_id:
            raise AuthorizationError("Forbidden - Not authorized to view this order")
        return True
