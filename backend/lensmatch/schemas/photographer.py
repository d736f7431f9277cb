from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CategoryOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: Optional[str] = None


class RatingOut(BaseModel):
    average: float = 0.0
    count: int = 0


class PortfolioItemIn(BaseModel):
    photographer_id: int
    image_url: str = Field(min_length=1, max_length=2048)
    caption: Optional[str] = Field(None, max_length=500)


class PortfolioItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    photographer_id: int
    image_url: str
    caption: Optional[str] = None
    created_at: Optional[datetime] = None


class PhotographerIn(BaseModel):
    bio: str = Field("", max_length=5000)
    city: Optional[str] = None
    state: Optional[str] = None
    base_rate: int = Field(ge=0)
    category_ids: list[int] = Field(default_factory=list)


class PhotographerUpdateIn(BaseModel):
    bio: Optional[str] = Field(None, max_length=5000)
    city: Optional[str] = None
    state: Optional[str] = None
    base_rate: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
    category_ids: Optional[list[int]] = None


class PhotographerOut(BaseModel):
    id: int
    user_id: int
    name: str
    profile_image_url: Optional[str] = None
    bio: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    base_rate: int
    is_verified: bool
    is_active: bool
    categories: list[CategoryOut] = []
    rating: RatingOut = RatingOut()
    portfolio_sample: Optional[str] = None


class PhotographerDetailOut(PhotographerOut):
    email: Optional[str] = None
    phone: Optional[str] = None
    portfolio_preview: list[PortfolioItemOut] = []


class VerifyIn(BaseModel):
    is_verified: bool
