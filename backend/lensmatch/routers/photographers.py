from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..deps import get_current_user
from ..models.photographer import Photographer
from ..models.user import User
from ..schemas.photographer import (
    CategoryOut,
    PhotographerDetailOut,
    PhotographerIn,
    PhotographerOut,
    PhotographerUpdateIn,
    PortfolioItemIn,
    PortfolioItemOut,
    RatingOut,
)
from ..services import photographers as svc

router = APIRouter(prefix="/api", tags=["photographers"])


def photographer_out(p: Photographer, rating: tuple[float, int] | None) -> PhotographerOut:
    avg, count = rating or (0.0, 0)
    return PhotographerOut(
        id=p.id,
        user_id=p.user_id,
        name=p.user.display_name,
        profile_image_url=p.user.profile_image_url,
        bio=p.bio,
        city=p.city,
        state=p.state,
        base_rate=p.base_rate,
        is_verified=p.is_verified,
        is_active=p.is_active,
        categories=[CategoryOut.model_validate(c) for c in p.categories],
        rating=RatingOut(average=avg, count=count),
        portfolio_sample=p.portfolio[0].image_url if p.portfolio else None,
    )


def _detail_out(db: Session, p: Photographer) -> PhotographerDetailOut:
    base = photographer_out(p, svc.ratings(db, [p.id]).get(p.id))
    return PhotographerDetailOut(
        **base.model_dump(),
        email=p.user.email,
        phone=p.user.phone,
        portfolio_preview=[
            PortfolioItemOut.model_validate(i) for i in p.portfolio[: svc.PORTFOLIO_PREVIEW_SIZE]
        ],
    )


@router.get("/categories", response_model=List[CategoryOut])
def categories(db: Session = Depends(get_db)):
    return svc.list_categories(db)


@router.get("/photographers", response_model=List[PhotographerOut])
def search_photographers(
    category: str | None = None,
    city: str | None = None,
    date: date | None = None,
    min_price: int | None = Query(None, alias="minPrice", ge=0),
    max_price: int | None = Query(None, alias="maxPrice", ge=0),
    db: Session = Depends(get_db),
):
    found = svc.search(
        db, category=category, city=city, day=date, min_price=min_price, max_price=max_price
    )
    ratings = svc.ratings(db, [p.id for p in found])
    return [photographer_out(p, ratings.get(p.id)) for p in found]


@router.get("/photographers/{photographer_id}", response_model=PhotographerDetailOut)
def get_photographer(photographer_id: int, db: Session = Depends(get_db)):
    return _detail_out(db, svc.get_profile(db, photographer_id))


@router.post("/photographers", response_model=PhotographerDetailOut, status_code=status.HTTP_201_CREATED)
def register_photographer(
    payload: PhotographerIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    p = svc.register(
        db,
        me,
        bio=payload.bio,
        city=payload.city,
        state=payload.state,
        base_rate=payload.base_rate,
        category_ids=payload.category_ids,
    )
    return _detail_out(db, p)


@router.put("/photographers/{photographer_id}", response_model=PhotographerDetailOut)
def update_photographer(
    photographer_id: int,
    payload: PhotographerUpdateIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    p = svc.update(db, me, photographer_id, payload.model_dump(exclude_unset=True))
    return _detail_out(db, p)


# -----------------------------------------------------------------------------
# PORTFOLIO
# -----------------------------------------------------------------------------
@router.get("/photographers/{photographer_id}/portfolio", response_model=List[PortfolioItemOut])
def portfolio(photographer_id: int, db: Session = Depends(get_db)):
    return svc.list_portfolio(db, photographer_id)


@router.post("/portfolio", response_model=PortfolioItemOut, status_code=status.HTTP_201_CREATED)
def add_portfolio_item(
    payload: PortfolioItemIn,
    db: Session = Depends(get_db),
    me: User = Depends(get_current_user),
):
    return svc.add_portfolio_item(db, me, payload.photographer_id, payload.image_url, payload.caption)
