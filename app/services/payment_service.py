"""
Payment providers used by the booking service
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
import asyncio
import logging
import random
import time

from app.config import settings
from app.core.metrics import PAYMENT_DURATION

logger = logging.getLogger(__name__)


@dataclass
class PaymentResult:
    """Outcome of a single charge"""
    success: bool
    receipt_number: Optional[str] = None
    message: str = ""


class PaymentProvider(ABC):
    """Charges a phone number for a purchase"""

    name = "provider"

    @abstractmethod
    async def charge(self, phone_number: str, amount: float) -> PaymentResult:
        ...


class SimulatedMpesaProvider(PaymentProvider):
    """
    Stand-in for an M-Pesa STK push

    Waits to mimic the customer confirming on their phone, then succeeds
    with the configured probability.
    """

    name = "mpesa-simulated"

    def __init__(
        self,
        delay_seconds: Optional[float] = None,
        success_rate: Optional[float] = None,
        rng: Optional[random.Random] = None
    ):
        self.delay_seconds = settings.PAYMENT_SIMULATION_DELAY_SECONDS if delay_seconds is None else delay_seconds
        self.success_rate = settings.PAYMENT_SUCCESS_RATE if success_rate is None else success_rate
        self.rng = rng or random.Random()

    async def charge(self, phone_number: str, amount: float) -> PaymentResult:
        started = time.perf_counter()
        logger.info(f"Simulating M-Pesa payment of {settings.CURRENCY} {amount} for {phone_number}")

        await asyncio.sleep(self.delay_seconds)
        PAYMENT_DURATION.labels(provider=self.name).observe(time.perf_counter() - started)

        if self.rng.random() < self.success_rate:
            return PaymentResult(
                success=True,
                receipt_number=f"MPESA-{int(time.time() * 1000)}",
                message="Payment successful"
            )

        logger.warning(f"Simulated M-Pesa payment declined for {phone_number}")
        return PaymentResult(success=False, message="Payment failed. Please try again.")
