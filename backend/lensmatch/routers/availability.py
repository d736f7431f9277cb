from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..core import policy
from ..core.policy import Action, Resource
from ..database import get_db
from ..deps import get_current_user
from ..models.user import User
from ..schemas.booking import SlotIn, SlotOut
from ..services import availability as ledger

router = APIRouter(prefix="/api", tags=["availability"])


@router.get("/photographers/{photographer_id}/availability", response_model=List[SlotOut])
def list_availability(photographer_id: int, db: Session = Depends(get_db)):
    policy.authorize(db, None, Resource.AVAILABILITY, photographer_id, Action.READ)
    return ledger.list_slots(db, photographer_id)


@router.post("/availability", response_model=SlotOut, status_code=status.HTTP_201_CREATED)
def add_availability(
    payload: SlotIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    policy.authorize(
        db, me, Resource.AVAILABILITY, payload.photographer_id, Action.WRITE,
        message="Not authorized to add availability",
    )
    return ledger.add_slot(db, payload.photographer_id, payload.date, payload.start_time, payload.end_time)
