"""HTTP responder: talks to the chat gateway over httpx."""
import logging
from typing import Dict, Optional

import httpx

from compliance_assistant.config import settings
from compliance_assistant.exceptions import TransportFailure
from compliance_assistant.interfaces.responder import IResponder

logger = logging.getLogger(__name__)

# Gateways differ in which key carries the answer
REPLY_KEYS = ("response", "message", "reply")


class HttpResponder(IResponder):
    """
    Posts each message to ``{base_url}/chat`` and reads the reply text.

    Any network error, non-2xx status or unparseable body is reported as
    TransportFailure.
    """

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        transport: httpx.AsyncBaseTransport = None
    ):
        self.base_url = (base_url or settings.RESPONDER_URL).rstrip('/')
        self.http_client = httpx.AsyncClient(
            timeout=timeout or settings.RESPONDER_TIMEOUT_SECONDS,
            transport=transport
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.http_client.aclose()

    async def close(self):
        """Close HTTP client."""
        await self.http_client.aclose()

    async def reply(self, message: str, metadata: Optional[Dict] = None) -> str:
        payload = {"message": message}
        payload.update(metadata or {})

        try:
            response = await self.http_client.post(f"{self.base_url}/chat", json=payload)
            response.raise_for_status()
            result = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Responder returned HTTP {e.response.status_code}")
            raise TransportFailure()
        except httpx.HTTPError as e:
            logger.error(f"Responder request failed: {e}")
            raise TransportFailure()
        except ValueError:
            logger.error("Responder returned a non-JSON body")
            raise TransportFailure()

        return extract_reply(result)


def extract_reply(result) -> str:
    """First non-empty reply field of a gateway response, '' if none."""
    if not isinstance(result, dict):
        return ''
    for key in REPLY_KEYS:
        value = result.get(key)
        if isinstance(value, str) and value:
            return value
    return ''
