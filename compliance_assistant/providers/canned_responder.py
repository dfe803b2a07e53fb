"""Offline responder returning fixed compliance guidance."""
import asyncio
import random
from typing import Dict, Optional

from compliance_assistant.interfaces.responder import IResponder

CANNED_REPLIES = (
    "Based on FICA-FDA regulations, this requires documentation of compliance "
    "procedures and thorough validation protocols.",
    "According to current FDA guidelines, you need to ensure proper validation "
    "protocols are implemented with detailed documentation.",
    "The FICA compliance framework suggests implementing robust security measures "
    "with regular auditing and monitoring.",
    "For regulatory compliance, please consider comprehensive documentation "
    "requirements and staff training programs.",
    "FDA regulations require systematic approach to quality management and "
    "continuous monitoring of compliance metrics.",
)


class CannedResponder(IResponder):
    """Picks one of the canned replies at random after an optional delay."""

    def __init__(self, latency: float = 0.0, rng: random.Random = None):
        self.latency = latency
        self.rng = rng or random.Random()

    async def reply(self, message: str, metadata: Optional[Dict] = None) -> str:
        if self.latency:
            await asyncio.sleep(self.latency)
        return self.rng.choice(CANNED_REPLIES)
