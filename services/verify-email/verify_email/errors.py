class VerificationError(RuntimeError):
    """Base class for failures the handler maps to an HTTP status."""

    status_code = 500
    kind = "unexpected"

    def __init__(self, public_message: str) -> None:
        super().__init__(public_message)
        self.public_message = public_message


class MissingField(VerificationError):
    status_code = 400
    kind = "missing_field"


class PersistenceFailure(VerificationError):
    kind = "persistence"

    def __init__(self, cause: str) -> None:
        # The cause is logged; callers only ever see the generic message
        super().__init__("Failed to send verification")
        self.cause = cause


class Misconfigured(VerificationError):
    kind = "misconfigured"

    def __init__(self, cause: str) -> None:
        # Settings errors echo their input values, which include the service key
        super().__init__("Server misconfigured")
        self.cause = cause
