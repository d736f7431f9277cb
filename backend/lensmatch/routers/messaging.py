from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import get_current_user
from ..models.user import User
from ..schemas.messaging import DeliverableIn, DeliverableOut, MessageIn, MessageOut
from ..services import messaging

router = APIRouter(prefix="/api", tags=["messaging"])


# -----------------------------------------------------------------------------
# MESSAGES
# -----------------------------------------------------------------------------
@router.get("/bookings/{booking_id}/messages", response_model=List[MessageOut])
def list_messages(booking_id: int, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return messaging.list_messages(db, booking_id, me)


@router.post("/messages", response_model=MessageOut, status_code=status.HTTP_201_CREATED)
def post_message(payload: MessageIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return messaging.post_message(db, payload.booking_id, me, payload.content)


@router.patch("/messages/{message_id}/read", response_model=MessageOut)
def mark_read(message_id: int, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return messaging.mark_read(db, message_id, me)


# -----------------------------------------------------------------------------
# DELIVERABLES
# -----------------------------------------------------------------------------
@router.get("/bookings/{booking_id}/deliverables", response_model=List[DeliverableOut])
def list_deliverables(booking_id: int, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return messaging.list_deliverables(db, booking_id, me)


@router.post("/deliverables", response_model=DeliverableOut, status_code=status.HTTP_201_CREATED)
def add_deliverable(payload: DeliverableIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    return messaging.add_deliverable(
        db, payload.booking_id, me, payload.title, payload.file_url, payload.description
    )
