from fastapi import APIRouter, Depends, HTTPException
from pydantic import field_validator
from sqlalchemy import orm
from typing import Literal
from datetime import datetime
import logging
import secrets

from config.database import get_db
from config.settings import DEMO_OTP, DEFAULT_SOCIETY_ID
from shared_utils.auth import create_access_token, get_current_user
from shared_utils.helpers import normalize_phone
from shared_utils.schema import CamelModel
from models import Society, User
from .schema import UserResponse
from .sms import send_otp_sms

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["auth"])

UserRole = Literal["admin", "resident", "guard", "auditor"]


class OtpSendRequest(CamelModel):
    phone: str
    role: UserRole = "resident"

    @field_validator('phone')
    @classmethod
    def validate_phone(cls, v):
        normalized = normalize_phone(v)
        if not normalized:
            raise ValueError('phone is not a valid phone number')
        return normalized


class OtpVerifyRequest(OtpSendRequest):
    otp: str


def ensure_default_society(db: orm.Session) -> Society:
    society = db.query(Society).filter(Society.id == DEFAULT_SOCIETY_ID).first()
    if society:
        return society
    society = Society(
        id=DEFAULT_SOCIETY_ID,
        name="Default Society",
        address="Not configured",
        city="Not configured",
        state="Not configured",
        pincode="000000",
    )
    db.add(society)
    db.flush()
    logger.warning(f"Created placeholder society {DEFAULT_SOCIETY_ID} for first-time sign-ups")
    return society


@router.post("/otp/send")
async def send_otp(payload: OtpSendRequest):
    # A real OTP provider would generate and remember the code; the demo code is fixed
    otp = DEMO_OTP
    logger.info(f"Sending OTP to {payload.phone} for role {payload.role}")
    if not await send_otp_sms(payload.phone, otp):
        raise HTTPException(status_code=502, detail="Failed to send OTP")
    return {"success": True, "message": "OTP sent successfully"}


@router.post("/otp/verify")
def verify_otp(payload: OtpVerifyRequest, db: orm.Session = Depends(get_db)):
    if not secrets.compare_digest(payload.otp.encode(), DEMO_OTP.encode()):
        raise HTTPException(status_code=400, detail="Invalid OTP")

    user = db.query(User).filter(User.username == payload.phone).first()
    if not user:
        society = ensure_default_society(db)
        user = User(
            username=payload.phone,
            password="!otp-only",  # not a usable password hash
            name="Security Guard" if payload.role == "guard" else "New User",
            phone=payload.phone,
            role=payload.role,
            society_id=society.id,
        )
        db.add(user)
        logger.info(f"Created first-time user for {payload.phone} with role {payload.role}")

    user.last_login = datetime.utcnow()
    db.commit()
    db.refresh(user)

    return {
        "success": True,
        "user": UserResponse.model_validate(user).model_dump(by_alias=True),
        "access_token": create_access_token(user),
    }


@router.get("/user", response_model=UserResponse)
def current_user(user: User = Depends(get_current_user)):
    return user
