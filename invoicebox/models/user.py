"""User document model for vendor accounts."""

from datetime import datetime
from enum import Enum
from typing import Optional

from beanie import Document, Indexed
from pydantic import BaseModel, Field


class Plan(str, Enum):
    """Subscription plan of a vendor account."""

    FREE = "FREE"
    STARTER = "STARTER"
    PRO = "PRO"


class ReminderSettings(BaseModel):
    """Per-vendor payment reminder schedule.

    Day offsets are relative to the invoice due date; None or 0 disables
    that reminder.
    """

    days_before: Optional[int] = None
    on_due_date: bool = False
    days_after_1: Optional[int] = None
    days_after_2: Optional[int] = None
    days_after_3: Optional[int] = None


class User(Document):
    """Vendor account that owns clients and invoices.

    Fields:
    - email: unique login email
    - hashed_password: Argon2 password hash
    - company_name: vendor's trading name, used in reminder emails
    - plan: subscription plan, drives client quotas and feature gates
    - logo_url: URL of the uploaded branding logo (PRO only)
    - reminder_settings: payment reminder schedule, None disables reminders
    """

    email: Indexed(str, unique=True)
    hashed_password: str
    is_active: bool = True
    full_name: Optional[str] = None
    company_name: Optional[str] = None
    plan: Plan = Plan.FREE
    logo_url: Optional[str] = None
    reminder_settings: Optional[ReminderSettings] = None

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
    last_login: Optional[datetime] = None

    class Settings:
        name = "users"
        use_state_management = True

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, plan={self.plan.value})>"
