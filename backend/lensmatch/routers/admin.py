from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import auth_admin
from ..models.user import User
from ..schemas.auth import UserOut
from ..schemas.photographer import PhotographerOut, VerifyIn
from ..services import admin
from ..services.photographers import ratings
from .photographers import photographer_out

router = APIRouter(prefix="/api/admin", tags=["admin"])


@router.get("/users", response_model=List[UserOut])
def list_users(db: Session = Depends(get_db), me: User = Depends(auth_admin)):
    return admin.list_users(db)


@router.patch("/photographers/{photographer_id}/verify", response_model=PhotographerOut)
def verify_photographer(
    photographer_id: int,
    payload: VerifyIn,
    db: Session = Depends(get_db),
    me: User = Depends(auth_admin),
):
    p = admin.set_verification(db, photographer_id, payload.is_verified)
    return photographer_out(p, ratings(db, [p.id]).get(p.id))
