"""
Registry module exceptions.
"""

from typing import Optional

from shared.exceptions import ExternalServiceError, ValidationError


class InvalidCNPJError(ValidationError):
    """Raised when a CNPJ does not have 14 digits."""

    def __init__(self, cnpj: str):
        super().__init__(
            "CNPJ deve ter 14 dígitos",
            code="INVALID_CNPJ",
            details={"cnpj": cnpj},
        )
        self.cnpj = cnpj


class RegistryLookupError(ExternalServiceError):
    """Raised when the registry lookup fails or reports an error."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message, service="receitaws", code="REGISTRY_LOOKUP_ERROR", status=status)
