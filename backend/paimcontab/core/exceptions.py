"""Domain errors raised by services and mapped to HTTP responses by routers."""


class PaimContabError(Exception):
    """Base class for all domain errors."""


class InvalidInputError(PaimContabError, ValueError):
    """Malformed or out-of-range argument, rejected before any write."""


class NotFoundError(PaimContabError):
    """Referenced entity does not exist."""

    def __init__(self, entity: str, entity_id: object):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class AlreadyPaidError(PaimContabError):
    """Attempted double settlement of a tax obligation."""

    def __init__(self, obligation_id: object):
        self.obligation_id = obligation_id
        super().__init__(f"Tax obligation {obligation_id} is already paid")


class UnknownAccountError(PaimContabError):
    """Payment event references an account that cannot be resolved."""

    def __init__(self, account_ref: object):
        self.account_ref = account_ref
        super().__init__(f"Unknown account: {account_ref}")


class UnknownPlanError(PaimContabError):
    """Payment event references a plan missing from storage and catalog."""

    def __init__(self, plan_id: object):
        self.plan_id = plan_id
        super().__init__(f"Unknown plan: {plan_id}")


class StorageConflictError(PaimContabError):
    """Concurrent write contention; the caller should retry the whole operation."""
