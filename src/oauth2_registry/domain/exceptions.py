"""Domain exceptions raised by the administrative services."""

from uuid import UUID


class RegistryError(Exception):
    """Base class for registry errors carrying an HTTP status."""

    status_code: int = 500
    title: str = "Registry Error"


class EntityNotFoundError(RegistryError):
    """Requested entity does not exist."""

    status_code = 404
    title = "Not Found"

    def __init__(self, entity_type: str, entity_id: UUID | str) -> None:
        self.entity_type = entity_type
        self.entity_id = str(entity_id)
        super().__init__(f"Requested {entity_type} with id [{entity_id}] was not found")


class AccessDeniedError(RegistryError):
    """Caller lacks the authority for the requested operation."""

    status_code = 403
    title = "Forbidden"

    def __init__(
        self, message: str = "You don't have permission to perform this operation!"
    ) -> None:
        super().__init__(message)


class RegistryValidationError(RegistryError):
    """Payload is well-formed but violates a registry rule."""

    status_code = 400
    title = "Bad Request"
