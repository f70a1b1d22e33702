"""Error taxonomy shared by services and the HTTP layer."""


class StoreError(Exception):
    """Error reported by the remote store or its auth subsystem."""

    UNIQUE_VIOLATION = "23505"
    INSUFFICIENT_PRIVILEGE = "42501"

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code

    @property
    def is_unique_violation(self) -> bool:
        """Return True when the store rejected a duplicate primary key."""
        return self.code == self.UNIQUE_VIOLATION

    @property
    def is_permission_denied(self) -> bool:
        """Return True when the store refused the caller's privileges."""
        return self.code == self.INSUFFICIENT_PRIVILEGE


class RecordsError(Exception):
    """Base class for errors surfaced to callers of the entity services."""

    kind = "records_error"
    retryable = False

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Unauthenticated(RecordsError):
    """No session is available for the caller."""

    kind = "unauthenticated"


class Forbidden(RecordsError):
    """The caller is authenticated but lacks the required role."""

    kind = "forbidden"


class DuplicateIdentity(RecordsError):
    """A record with the derived identifier already exists."""

    kind = "duplicate_identity"


class TransientAllocationConflict(RecordsError):
    """Profile sequence allocation kept racing with other writers."""

    kind = "transient_allocation_conflict"
    retryable = True


class RemoteFailure(RecordsError):
    """Any other store or auth failure."""

    kind = "remote_failure"


class ValidationFailed(RecordsError):
    """Submitted input cannot produce a valid record."""

    kind = "validation_failed"


class RecordNotFound(RecordsError):
    """The record does not exist or is not owned by the caller."""

    kind = "not_found"


class ConfirmationRequired(RecordsError):
    """An irreversible action was requested without confirmation."""

    kind = "confirmation_required"


class ActionInProgress(RecordsError):
    """The same action is already pending for the caller."""

    kind = "action_in_progress"
