class PlannerError(Exception):
    pass


class NotFoundError(PlannerError):
    """Entity missing, or owned by another user. Both look the same to the caller."""

    def __init__(self, entity, entity_id):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class InvalidRecurrenceError(PlannerError, ValueError):
    def __init__(self, kind):
        self.kind = kind
        super().__init__(f"Invalid recurrence: {kind!r}")


class InvariantViolation(PlannerError):
    """Internal consistency breach; never a user-facing condition."""
