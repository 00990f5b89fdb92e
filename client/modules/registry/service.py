"""
CNPJ lookup against ReceitaWS.
"""

import logging
import re
from typing import Optional

import httpx

from shared.config import Settings, get_settings

from .exceptions import InvalidCNPJError, RegistryLookupError
from .models import CompanyInfo

logger = logging.getLogger(__name__)


CNPJ_LENGTH = 14

_NON_DIGITS = re.compile(r"\D")


def normalize_cnpj(cnpj: str) -> str:
    """
    Strip formatting from a CNPJ.

    Raises:
        InvalidCNPJError: If the result is not exactly 14 digits
    """
    digits = _NON_DIGITS.sub("", cnpj or "")
    if len(digits) != CNPJ_LENGTH:
        raise InvalidCNPJError(cnpj)
    return digits


class CompanyRegistryClient:
    """Looks companies up by CNPJ."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or get_settings()
        self._http = http_client

    def _request_args(self, cnpj: str) -> tuple[str, dict, dict]:
        url = f"{self._settings.receitaws_url.rstrip('/')}/{cnpj}"
        headers = {"Accept": "application/json"}
        params = {}
        token = self._settings.receitaws_token
        if token:
            params["token"] = token
            headers["Authorization"] = f"Bearer {token}"
        return url, params, headers

    async def lookup(self, cnpj: str) -> CompanyInfo:
        """
        Fetch registration data for a CNPJ.

        Args:
            cnpj: CNPJ, formatted or digits only

        Returns:
            CompanyInfo for the company

        Raises:
            InvalidCNPJError: If the CNPJ is malformed
            RegistryLookupError: If the service fails or reports an error
        """
        digits = normalize_cnpj(cnpj)
        url, params, headers = self._request_args(digits)

        try:
            if self._http is not None:
                response = await self._http.get(
                    url, params=params, headers=headers, timeout=self._settings.http_timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.get(
                        url, params=params, headers=headers, timeout=self._settings.http_timeout
                    )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.error(f"ReceitaWS error {status}: {e.response.text}")
            raise RegistryLookupError(f"Erro na API: {status}", status=status)
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error fetching CNPJ {digits}: {e}")
            raise RegistryLookupError("Erro ao consultar CNPJ")

        if not isinstance(data, dict):
            raise RegistryLookupError("Erro ao consultar CNPJ")
        if data.get("status") == "ERROR":
            raise RegistryLookupError(data.get("message") or "CNPJ não encontrado", status=response.status_code)

        data["cnpj"] = digits
        info = CompanyInfo.model_validate(data)
        logger.debug(f"CNPJ {digits} resolved to {info.legal_name}")
        return info
