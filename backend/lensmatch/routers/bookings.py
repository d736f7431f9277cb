from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import get_current_user, get_payment_gateway
from ..models.booking import Booking
from ..models.user import User
from ..schemas.booking import (
    BookingCreatedOut,
    BookingIn,
    BookingOut,
    PartyOut,
    PaymentIntentIn,
    PaymentIntentOut,
    StatusIn,
)
from ..services import booking as workflow
from ..services.payments import ChargeGateway

router = APIRouter(prefix="/api", tags=["bookings"])


def booking_out(b: Booking) -> BookingOut:
    customer = b.customer
    photographer = b.photographer
    return BookingOut(
        id=b.id,
        customer_id=b.customer_id,
        photographer_id=b.photographer_id,
        category_id=b.category_id,
        date=b.date,
        start_time=b.start_time,
        end_time=b.end_time,
        location=b.location,
        notes=b.notes,
        total_amount=b.total_amount,
        currency=b.currency,
        status=b.status.value,
        payment_intent_id=b.payment_intent_id,
        created_at=b.created_at,
        updated_at=b.updated_at,
        customer=PartyOut(id=customer.id, name=customer.display_name) if customer else None,
        photographer=(
            PartyOut(id=photographer.id, name=photographer.user.display_name) if photographer else None
        ),
    )


@router.get("/bookings", response_model=List[BookingOut])
def list_bookings(db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return [booking_out(b) for b in workflow.list_bookings(db, me)]


@router.get("/bookings/{booking_id}", response_model=BookingOut)
def get_booking(booking_id: int, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return booking_out(workflow.get_booking(db, booking_id, me))


@router.post("/bookings", response_model=BookingCreatedOut, status_code=status.HTTP_201_CREATED)
def create_booking(
    payload: BookingIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
    gateway: ChargeGateway | None = Depends(get_payment_gateway),
):
    booking, client_secret = workflow.create_booking(
        db,
        me,
        photographer_id=payload.photographer_id,
        day=payload.date,
        start_time=payload.start_time,
        end_time=payload.end_time,
        total_amount=payload.total_amount,
        location=payload.location,
        notes=payload.notes,
        category_id=payload.category_id,
        gateway=gateway,
    )
    return BookingCreatedOut(booking=booking_out(booking), client_secret=client_secret)


@router.patch("/bookings/{booking_id}/status", response_model=BookingOut)
def update_status(
    booking_id: int,
    payload: StatusIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return booking_out(workflow.set_status(db, booking_id, payload.status, me))


@router.post("/create-payment-intent", response_model=PaymentIntentOut)
def create_payment_intent(
    payload: PaymentIntentIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
    gateway: ChargeGateway | None = Depends(get_payment_gateway),
):
    return PaymentIntentOut(
        client_secret=workflow.payment_client_secret(db, payload.booking_id, me, gateway)
    )
