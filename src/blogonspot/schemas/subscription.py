"""Subscription-related Pydantic schemas."""

from datetime import datetime
from typing import Any

from pydantic import model_validator

from .common import APIModel


class SubscriptionResponse(APIModel):
    """Subscription record as returned by the API."""

    id: int
    subscriber: int
    creator: int
    start_date: datetime
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def _from_orm(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        return {
            "id": data.id,
            "subscriber": data.subscriber_id,
            "creator": data.creator_id,
            "start_date": data.start_date,
            "is_active": data.is_active,
            "created_at": data.created_at,
            "updated_at": data.updated_at,
        }


class SubscribeResponse(APIModel):
    """Acknowledgement of a new or reactivated subscription."""

    message: str
    subscription: SubscriptionResponse


class CreatorSummary(APIModel):
    """Creator details shown in a subscriber's subscription list."""

    id: int
    username: str
    avatar: str
    creator_bio: str
    creator_category: str


class MySubscriptionEntry(APIModel):
    """One active subscription with its creator."""

    id: int
    creator: CreatorSummary
    start_date: datetime
    is_active: bool

    @model_validator(mode="before")
    @classmethod
    def _from_orm(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return data
        creator = data.creator
        return {
            "id": data.id,
            "creator": {
                "id": creator.id,
                "username": creator.username,
                "avatar": creator.avatar,
                "creator_bio": creator.creator_bio,
                "creator_category": creator.creator_category,
            },
            "start_date": data.start_date,
            "is_active": data.is_active,
        }
