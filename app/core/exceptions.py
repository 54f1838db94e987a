class MenuPlatformException(Exception):
    """Base exception for the menu platform"""

    pass


class UnauthorizedException(MenuPlatformException):
    """Raised when JWT validation fails"""

    pass


class NotFoundException(MenuPlatformException):
    """Raised when resource not found (or owned by another tenant)"""

    pass


class TenantNotResolvableException(NotFoundException):
    """Raised when no servable restaurant matches the request"""

    def __init__(self, message: str = "Restaurant not found"):
        super().__init__(message)


class ForbiddenException(MenuPlatformException):
    """Raised when the caller lacks a role, capability or tenant context"""

    pass


class PlanLimitExceededException(ForbiddenException):
    """Raised when a create would exceed the tenant's plan limit"""

    pass


class ValidationException(MenuPlatformException):
    """Raised for business logic validation errors"""

    pass


class WebhookSignatureException(MenuPlatformException):
    """Raised when a payment webhook fails signature verification"""

    pass


class UpstreamServiceException(MenuPlatformException):
    """Raised when the payment provider or messaging relay fails"""

    pass
