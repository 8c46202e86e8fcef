"""Error taxonomy shared by services and the HTTP layer"""

class Trash2TradeError(Exception):
    """Base exception for all domain errors.

    ``status_code`` is the HTTP status the API answers with; ``message`` is
    safe to show to the caller.
    """
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)

class InvalidArgumentError(Trash2TradeError):
    """Malformed or missing input"""
    status_code = 400
    default_message = "Invalid request"

class UnauthenticatedError(Trash2TradeError):
    status_code = 401
    default_message = "Authentication required"

class ForbiddenError(Trash2TradeError):
    """Caller is known but may not perform the operation"""
    status_code = 403
    default_message = "Access denied"

class NotFoundError(Trash2TradeError):
    status_code = 404
    default_message = "Not found"

class ConflictError(Trash2TradeError):
    status_code = 409
    default_message = "Conflict"

class InsufficientBalanceError(Trash2TradeError):
    status_code = 400
    default_message = "Not enough GreenCoins to redeem this reward"

class InvalidStateError(Trash2TradeError):
    """Operation not allowed in the entity's current state"""
    status_code = 400
    default_message = "Operation not allowed in the current state"

class InternalError(Trash2TradeError):
    """Unexpected failure; details are logged, never returned"""
    pass
