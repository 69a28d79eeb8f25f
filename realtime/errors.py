class RelayError(Exception):
    """Base relay failure; converted into an outbound frame for the sender"""

    frame_type = "error"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_frame(self) -> dict:
        return {"type": self.frame_type, "message": self.message}


class MalformedEvent(RelayError):
    pass


class AuthError(RelayError):
    frame_type = "auth_error"


class NotAuthenticated(RelayError):
    def __init__(self, event_type: str):
        super().__init__(f"Authentication required before '{event_type}'")


class TenantMismatch(RelayError):
    def __init__(self):
        super().__init__("Event society does not match the authenticated society")


class NotFound(RelayError):
    pass


class PersistenceError(RelayError):
    pass
