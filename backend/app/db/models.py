"""
SQLModel models for Aiser.
- User accounts with investor profile fields
- Portfolio holdings owned by a user
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import Enum
from typing import List, Optional

from sqlalchemy import Column, DateTime, JSON
from sqlalchemy.sql import func
from sqlmodel import Field, SQLModel


def gen_uuid() -> str:
    return str(uuid.uuid4())


def _now_utc() -> datetime:
    return datetime.now(timezone.utc)


class InvestmentExperience(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class RiskTolerance(str, Enum):
    conservative = "conservative"
    moderate = "moderate"
    aggressive = "aggressive"


class User(SQLModel, table=True):
    __tablename__ = "users"
    __table_args__ = {'extend_existing': True}

    id: str = Field(default_factory=gen_uuid, primary_key=True, index=True)
    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    email: str = Field(unique=True, index=True, nullable=False)
    password_hash: str = Field(nullable=False)
    is_email_verified: bool = Field(default=False)
    profile_picture: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    investment_experience: str = Field(default=InvestmentExperience.beginner.value)
    risk_tolerance: str = Field(default=RiskTolerance.moderate.value)
    investment_goals: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    monthly_income: Optional[float] = Field(default=None, ge=0)
    created_at: datetime = Field(
        default_factory=_now_utc,
        sa_column=Column(DateTime(timezone=True), server_default=func.now())
    )
    updated_at: datetime = Field(
        default_factory=_now_utc,
        sa_column=Column(DateTime(timezone=True), onupdate=func.now())
    )


class Holding(SQLModel, table=True):
    __tablename__ = "holdings"
    __table_args__ = {'extend_existing': True}

    id: str = Field(default_factory=gen_uuid, primary_key=True, index=True)
    user_id: str = Field(foreign_key="users.id", nullable=False, index=True)
    symbol: str = Field(nullable=False, index=True)
    quantity: float = Field(nullable=False)
    average_price: float = Field(default=0.0)
    current_price: Optional[float] = None
    created_at: datetime = Field(
        default_factory=_now_utc,
        sa_column=Column(DateTime(timezone=True), server_default=func.now())
    )
