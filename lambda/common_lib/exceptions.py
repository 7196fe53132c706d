"""
Common exceptions used across the application
"""


class BusinessLogicError(Exception):
    """Custom exception for business logic errors"""
    def __init__(self, message, status_code=400):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class ValidationError(BusinessLogicError):
    """Custom exception for validation errors"""
    def __init__(self, message, field=None):
        self.field = field
        super().__init__(message, 400)


class AuthenticationError(BusinessLogicError):
    """Raised when no caller identity can be resolved"""
    def __init__(self, message="Unauthorized - User ID not found"):
        super().__init__(message, 401)


class AuthorizationError(BusinessLogicError):
    """Raised when a role or ownership check fails"""
    def __init__(self, message="Insufficient permissions"):
        super().__init__(message, 403)


class NotFoundError(BusinessLogicError):
    def __init__(self, message):
        super().__init__(message, 404)


class DependencyError(BusinessLogicError):
    """Base for failures of an external collaborator (store, topic, queue)"""
    def __init__(self, message, cause=None):
        self.cause = cause
        super().__init__(message, 500)


class StorageError(DependencyError):
    pass


class PublishError(DependencyError):
    pass


class EnqueueError(DependencyError):
    pass
