"""Custom exceptions for the quoting application."""

class CotizadorError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="Ocurrió un error interno", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class ValidationError(CotizadorError):
    """Raised for missing or malformed request fields."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)

class NotFoundError(CotizadorError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Recurso no encontrado", payload=None):
        super().__init__(message, 404, payload)

class ConflictError(CotizadorError):
    """Raised when a request is well-formed but cannot be applied as sent."""
    def __init__(self, message, payload=None):
        super().__init__(message, 409, payload)

class TransactionError(CotizadorError):
    """Raised when a multi-step write fails and is rolled back."""
    def __init__(self, message="Error al procesar la operación"):
        super().__init__(message, 500)

class UnauthorizedError(CotizadorError):
    """Raised when the request carries no authenticated principal."""
    def __init__(self, message="Acceso no autorizado"):
        super().__init__(message, 401)

class ForbiddenError(CotizadorError):
    """Raised when a user lacks permission for an action."""
    def __init__(self, message="No tienes permisos para esta acción"):
        super().__init__(message, 403)
