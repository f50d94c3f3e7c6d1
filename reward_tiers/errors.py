"""Domain errors raised by the reward tier services.

Routes never catch these one by one: ``main`` registers a handler per class
that turns the message into an HTTP response.
"""


class RewardTiersError(Exception):
    """Base class for all reward tier errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(RewardTiersError):
    """A field constraint or key uniqueness rule was violated."""


class RewardInUse(ValidationError):
    """The reward is still referenced by at least one customer."""


class InvalidReference(RewardTiersError):
    """A customer was linked to a reward code that does not exist."""


class BusinessRuleViolation(RewardTiersError):
    status_code = 409


class NotFound(RewardTiersError):
    status_code = 404


class MigrationPrecondition(RewardTiersError):
    """The stored data does not have the shape an upgrade step expects."""

    status_code = 409


class BootstrapError(RewardTiersError):
    """Seeding the initial catalog failed."""

    status_code = 500
