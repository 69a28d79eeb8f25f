"""
OTP delivery through an external SMS gateway
"""
import logging
from typing import Optional

import httpx

from config.settings import SMS_GATEWAY_URL, SMS_GATEWAY_TIMEOUT

logger = logging.getLogger(__name__)


async def send_otp_sms(phone: str, otp: str, gateway_url: Optional[str] = None) -> bool:
    """
    Send an OTP through the configured SMS gateway.

    Without a gateway (development) the OTP is only logged.

    Returns:
        True when the gateway accepted the message or none is configured
    """
    gateway_url = gateway_url or SMS_GATEWAY_URL
    if not gateway_url:
        logger.info(f"SMS gateway not configured; OTP for {phone} not sent (development mode)")
        return True

    try:
        async with httpx.AsyncClient(timeout=SMS_GATEWAY_TIMEOUT) as client:
            response = await client.post(gateway_url, json={"to": phone, "message": f"Your GateSphere OTP is {otp}"})
            response.raise_for_status()
        logger.info(f"✅ OTP sent to {phone}")
        return True
    except httpx.TimeoutException:
        logger.error(f"❌ SMS gateway timed out sending OTP to {phone}")
        return False
    except httpx.HTTPError as e:
        logger.error(f"❌ SMS gateway failed for {phone}: {str(e)}")
        return False
