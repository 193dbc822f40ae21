from datetime import date, datetime
from typing import Literal, Optional

from pydantic import Field, StrictInt, field_validator, model_validator

from app.schemas import PatchModel, RequestModel

Category = Literal['food', 'hiking', 'tours', 'shopping', 'adventure', 'outdoors', 'other']


def check_date_order(start_date, end_date):
    if start_date and end_date and end_date <= start_date:
        raise ValueError('end_date must be after start_date')


class TripCreate(RequestModel):
    title: str = Field(min_length=3, max_length=100)
    destination: str = Field(min_length=1, max_length=255)
    radius: int = Field(ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_private: bool = True

    @model_validator(mode='after')
    def dates_in_order(self):
        if self.start_date and not self.end_date:
            raise ValueError('end_date is required when start_date is given')
        check_date_order(self.start_date, self.end_date)
        return self


class TripPatch(PatchModel):
    not_null = ('title', 'destination', 'radius', 'is_private')

    title: Optional[str] = Field(default=None, min_length=3, max_length=100)
    destination: Optional[str] = Field(default=None, min_length=1, max_length=255)
    radius: Optional[int] = Field(default=None, ge=0)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_private: Optional[bool] = None

    @model_validator(mode='after')
    def dates_in_order(self):
        check_date_order(self.start_date, self.end_date)
        return self


class ActivityCreate(RequestModel):
    name: str = Field(min_length=3, max_length=100)
    category: Category = 'other'
    description: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=255)
    scheduled_time: Optional[datetime] = None


class ActivityPatch(PatchModel):
    not_null = ('name', 'category')

    name: Optional[str] = Field(default=None, min_length=3, max_length=100)
    category: Optional[Category] = None
    description: Optional[str] = Field(default=None, max_length=500)
    location: Optional[str] = Field(default=None, max_length=255)
    scheduled_time: Optional[datetime] = None


class VoteIn(RequestModel):
    vote_value: StrictInt

    @field_validator('vote_value')
    @classmethod
    def known_vote_value(cls, value):
        if value not in (-1, 0, 1):
            raise ValueError('must be 1 (upvote), -1 (downvote) or 0 (vote removal)')
        return value


class CommentCreate(RequestModel):
    text: str = Field(min_length=1, max_length=500)


class MemberAdd(RequestModel):
    friend_id: StrictInt
