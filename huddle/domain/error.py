"""Domain layer errors."""


class DomainError(Exception):
    """Base domain error."""

    pass


class ValidationError(DomainError):
    """Domain validation error."""

    pass


class BusinessRuleViolationError(DomainError):
    """Business rule violation error."""

    pass


class NotAuthorizedError(DomainError):
    """Raised when a member attempts an action their role does not allow."""

    def __init__(self, action: str, resource: str, user_id: str):
        self.action = action
        self.resource = resource
        super().__init__(f"User {user_id} is not allowed to {action} {resource}")


class NotFoundError(DomainError):
    """Raised when a requested resource is not found."""

    def __init__(self, resource: str, identifier: str):
        self.resource = resource
        self.identifier = identifier
        super().__init__(f"{resource} not found: {identifier}")


class TenantNotFoundError(NotFoundError):
    """Raised when a tenant slug does not resolve to an active company."""

    def __init__(self, slug: str):
        super().__init__("Company", slug)


class TextSearchUnavailableError(DomainError):
    """Raised by a repository when full-text search cannot be served."""

    pass
