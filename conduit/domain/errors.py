"""Domain-specific exceptions, framework-independent."""


class ValidationError(Exception):
    """Raised when an entity is constructed or mutated with invalid input.

    ``errors`` maps a field name to the list of problems found with it.
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        summary = "; ".join(f"{field}: {', '.join(msgs)}" for field, msgs in errors.items())
        super().__init__(summary)


class EntityNotFoundError(Exception):
    """Raised by application services when a referenced entity does not exist."""

    def __init__(self, entity_type: str, key: str):
        self.entity_type = entity_type
        self.key = key
        super().__init__(f"{entity_type} '{key}' not found")


class DuplicateEntityError(Exception):
    """Raised when attempting to create an entity whose unique field is taken."""

    def __init__(self, entity_type: str, field: str, value: str):
        self.entity_type = entity_type
        self.field = field
        self.value = value
        super().__init__(f"{entity_type} with {field}='{value}' already exists")


class AuthenticationError(Exception):
    """Raised when supplied credentials do not identify a user."""


class AuthorizationError(Exception):
    """Raised when an identified user may not perform an operation."""
