from fastapi import APIRouter, Depends, HTTPException

from helpers.captcha import CaptchaVerifier, get_captcha_verifier
from helpers.schemas import CaptchaRequest

captcha_router = APIRouter()


@captcha_router.post("/verify-captcha")
async def verify_captcha_token(req: CaptchaRequest, verify: CaptchaVerifier = Depends(get_captcha_verifier)):
    if not req.token:
        raise HTTPException(status_code=400, detail="Captcha token is required")
    if not await verify(req.token):
        raise HTTPException(status_code=400, detail="Captcha verification failed")
    return {"success": True}
