from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ReviewIn(BaseModel):
    booking_id: int
    rating: int = Field(ge=1, le=5)
    comment: Optional[str] = Field(None, max_length=2000)


class ReviewOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_id: int
    customer_id: int
    photographer_id: int
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    customer_name: Optional[str] = None


class MessageIn(BaseModel):
    booking_id: int
    content: str = Field(min_length=1, max_length=5000)


class MessageOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_id: int
    sender_id: int
    receiver_id: int
    content: str
    sent_at: Optional[datetime] = None
    is_read: bool


class DeliverableIn(BaseModel):
    booking_id: int
    title: str = Field(min_length=1, max_length=200)
    file_url: str = Field(min_length=1, max_length=2048)
    description: Optional[str] = Field(None, max_length=2000)


class DeliverableOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    booking_id: int
    title: str
    description: Optional[str] = None
    file_url: str
    uploaded_at: Optional[datetime] = None
