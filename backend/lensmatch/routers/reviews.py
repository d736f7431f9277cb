from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import get_current_user
from ..models.review import Review
from ..models.user import User
from ..schemas.messaging import ReviewIn, ReviewOut
from ..services import photographers, reviews

router = APIRouter(prefix="/api", tags=["reviews"])


def _review_out(r: Review) -> ReviewOut:
    out = ReviewOut.model_validate(r)
    out.customer_name = r.customer.display_name if r.customer else None
    return out


@router.get("/photographers/{photographer_id}/reviews", response_model=List[ReviewOut])
def photographer_reviews(photographer_id: int, db: Session = Depends(get_db)):
    photographers.get_profile(db, photographer_id)
    return [_review_out(r) for r in reviews.list_photographer_reviews(db, photographer_id)]


@router.post("/reviews", response_model=ReviewOut, status_code=status.HTTP_201_CREATED)
def create_review(payload: ReviewIn, db: Session = Depends(get_db), me: User = Depends(get_current_user)):
    r = reviews.create_review(db, me, payload.booking_id, payload.rating, payload.comment)
    return _review_out(r)
