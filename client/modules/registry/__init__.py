"""
Registry module.

Company registry (CNPJ) lookups used when clients sign up.

Public API:
- CompanyRegistryClient: ReceitaWS lookup
- CompanyInfo: Registration data of one company
- normalize_cnpj: Strip formatting and validate length
"""

from .models import CompanyInfo
from .service import CompanyRegistryClient, normalize_cnpj
from .exceptions import InvalidCNPJError, RegistryLookupError

__all__ = [
    "CompanyInfo",
    "CompanyRegistryClient",
    "normalize_cnpj",
    "InvalidCNPJError",
    "RegistryLookupError",
]
