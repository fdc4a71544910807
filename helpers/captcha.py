import logging
import os
from typing import Awaitable, Callable, Optional

import httpx
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

TURNSTILE_VERIFY_URL = "https://challenges.cloudflare.com/turnstile/v0/siteverify"

CaptchaVerifier = Callable[[Optional[str]], Awaitable[bool]]


async def verify_captcha(token: Optional[str]) -> bool:
    """Check a Cloudflare Turnstile token. No retries: any failure is a rejection."""
    if not token:
        return False

    secret = os.getenv("TURNSTILE_SECRET_KEY")
    if not secret:
        logger.error("TURNSTILE_SECRET_KEY is not set, rejecting captcha token")
        return False

    url = os.getenv("TURNSTILE_VERIFY_URL", TURNSTILE_VERIFY_URL)
    try:
        async with httpx.AsyncClient() as client:
            response = await client.post(
                url,
                data={"secret": secret, "response": token},
                timeout=8.0,
            )
            result = response.json()
    except (httpx.HTTPError, ValueError) as e:
        logger.warning(f"Captcha verification request failed: {e}")
        return False

    if not isinstance(result, dict):
        logger.warning(f"Unexpected captcha verification response: {result!r}")
        return False
    if not result.get("success"):
        logger.info(f"Captcha rejected: {result.get('error-codes', [])}")
        return False
    return True


def get_captcha_verifier() -> CaptchaVerifier:
    return verify_captcha
