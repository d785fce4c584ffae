"""
Gateway Client - collect requests against the payment gateway ERP API.
"""

import logging
from typing import Any, Optional

import httpx

from schoolpay.exceptions import ConfigurationError, GatewayError

logger = logging.getLogger(__name__)

COLLECT_REQUEST_PATH = "/erp/create-collect-request"

# The gateway does not guarantee the casing of the redirect field.
# First non-empty match wins, in this order.
REDIRECT_URL_FIELDS = (
    "Collect_request_url",
    "collect_request_url",
    "payment_url",
)


def extract_redirect_url(data: Any) -> Optional[str]:
    """Return the hosted payment page URL from a collect-request response."""
    if not isinstance(data, dict):
        return None
    
    for field in REDIRECT_URL_FIELDS:
        value = data.get(field)
        if isinstance(value, str) and value.strip():
            return value.strip()
    
    return None


class GatewayClient:
    """HTTP client for the collect-request gateway. One attempt per call."""
    
    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not api_key:
            raise ConfigurationError("Payment gateway API key not configured")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport
    
    @property
    def collect_request_url(self) -> str:
        return f"{self.base_url}{COLLECT_REQUEST_PATH}"
    
    async def create_collect_request(
        self,
        school_id: str,
        amount: str,
        callback_url: str,
        sign: str,
    ) -> str:
        """
        Create a collect request and return the redirect URL.
        
        Raises GatewayError on transport failure, non-2xx status,
        non-JSON body, or a response without a redirect URL.
        """
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "school_id": school_id,
            "amount": amount,
            "callback_url": callback_url,
            "sign": sign,
        }
        
        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.collect_request_url,
                    json=payload,
                    headers=headers,
                )
        except httpx.TimeoutException as e:
            logger.error(f"Gateway request timeout for school {school_id}")
            raise GatewayError(f"Gateway request timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.error(f"Gateway transport error for school {school_id}: {e}")
            raise GatewayError(f"Gateway request failed: {e}") from e
        
        if not response.is_success:
            logger.error(f"Gateway HTTP error: {response.status_code} {response.text}")
            raise GatewayError(
                f"Gateway responded with HTTP {response.status_code}",
                detail=response.text[:500] or None,
                upstream_status=response.status_code,
            )
        
        try:
            data = response.json()
        except ValueError as e:
            logger.error(f"Gateway returned non-JSON body: {response.text[:200]}")
            raise GatewayError(
                "Gateway response is not valid JSON",
                upstream_status=response.status_code,
            ) from e
        
        redirect_url = extract_redirect_url(data)
        if not redirect_url:
            logger.error(f"Gateway response missing redirect URL: {data}")
            raise GatewayError(
                "Gateway response did not include a payment URL",
                detail=data,
                upstream_status=response.status_code,
            )
        
        return redirect_url
