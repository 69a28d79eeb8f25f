from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import orm
from typing import List, Optional
from decimal import Decimal
import logging

from config.database import get_db
from shared_utils.auth import get_current_user, require_roles
from shared_utils.tenancy import get_owned_or_404
from models import Flat, User
from .models import Amenity, AmenityBooking
from .schema import AmenityCreate, AmenityResponse, BookingCreate, BookingResponse, BookingStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["amenities"])


@router.get("/amenities", response_model=List[AmenityResponse])
def list_amenities(user: User = Depends(get_current_user), db: orm.Session = Depends(get_db)):
    return (db.query(Amenity)
            .filter(Amenity.society_id == user.society_id, Amenity.is_active.is_(True))
            .order_by(Amenity.name.asc())
            .all())


@router.post("/amenities", response_model=AmenityResponse, status_code=201)
def create_amenity(
    payload: AmenityCreate,
    user: User = Depends(require_roles("admin")),
    db: orm.Session = Depends(get_db),
):
    amenity = Amenity(**payload.model_dump(), society_id=user.society_id)
    db.add(amenity)
    db.commit()
    db.refresh(amenity)
    return amenity


@router.get("/amenity-bookings", response_model=List[BookingResponse])
def list_bookings(
    status: Optional[BookingStatus] = None,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    query = db.query(AmenityBooking).filter(AmenityBooking.society_id == user.society_id)
    if status:
        query = query.filter(AmenityBooking.status == status)
    return query.order_by(AmenityBooking.created_at.desc(), AmenityBooking.id.desc()).all()


@router.post("/amenity-bookings", response_model=BookingResponse, status_code=201)
def create_booking(
    payload: BookingCreate,
    user: User = Depends(get_current_user),
    db: orm.Session = Depends(get_db),
):
    if payload.end_time <= payload.start_time:
        raise HTTPException(status_code=400, detail="Booking must end after it starts")

    amenity = get_owned_or_404(db, Amenity, payload.amenity_id, user.society_id, label="Amenity")
    if not amenity.is_active:
        raise HTTPException(status_code=400, detail="Amenity is not available for booking")
    get_owned_or_404(db, Flat, payload.flat_id, user.society_id, label="Flat")
    if amenity.capacity and payload.guests > amenity.capacity:
        raise HTTPException(status_code=400, detail=f"Amenity capacity is {amenity.capacity}")

    clash = (db.query(AmenityBooking)
             .filter(AmenityBooking.amenity_id == amenity.id,
                     AmenityBooking.status == "confirmed",
                     AmenityBooking.start_time < payload.end_time,
                     AmenityBooking.end_time > payload.start_time)
             .first())
    if clash:
        raise HTTPException(status_code=409, detail=f"Amenity already booked (booking {clash.id})")

    total_amount = None
    if amenity.hourly_rate is not None:
        hours = Decimal(str((payload.end_time - payload.start_time).total_seconds() / 3600))
        total_amount = (Decimal(amenity.hourly_rate) * hours).quantize(Decimal("0.01"))

    booking = AmenityBooking(
        **payload.model_dump(),
        society_id=user.society_id,
        booked_by=user.id,
        total_amount=total_amount,
        status="confirmed",
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    logger.info(f"Amenity {amenity.id} booked by user {user.id} ({payload.start_time} - {payload.end_time})")
    return booking
