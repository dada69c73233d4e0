# backend/app/schemas/users.py
from datetime import date, datetime
from typing import List, Optional

from pydantic import EmailStr, Field

from backend.app.db.models import InvestmentExperience, RiskTolerance
from backend.app.schemas.base import CamelModel, PersonName


class UserOut(CamelModel):
    id: str
    first_name: str
    last_name: str
    email: EmailStr
    is_email_verified: bool = False


class ProfileOut(UserOut):
    profile_picture: Optional[str] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    investment_experience: InvestmentExperience
    risk_tolerance: RiskTolerance
    investment_goals: List[str] = []
    monthly_income: Optional[float] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class ProfileUpdate(CamelModel):
    first_name: Optional[PersonName] = Field(default=None, min_length=1)
    last_name: Optional[PersonName] = Field(default=None, min_length=1)
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    investment_experience: Optional[InvestmentExperience] = None
    risk_tolerance: Optional[RiskTolerance] = None
    investment_goals: Optional[List[str]] = None
    monthly_income: Optional[float] = Field(default=None, ge=0)
