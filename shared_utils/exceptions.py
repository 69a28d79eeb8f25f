class InvalidTransition(Exception):
    """Raised when a status change is not an edge of the state machine"""

    def __init__(self, entity: str, current: str, target: str):
        self.entity = entity
        self.current = current
        self.target = target
        super().__init__(f"Illegal {entity} status transition: {current} -> {target}")


class TransitionNotPermitted(Exception):
    """Raised when the acting role may not take an otherwise legal edge"""

    def __init__(self, entity: str, target: str, role: str):
        self.entity = entity
        self.target = target
        self.role = role
        super().__init__(f"Role '{role}' may not move a {entity} to '{target}'")
