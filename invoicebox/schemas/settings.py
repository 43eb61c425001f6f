"""Pydantic schemas for account settings."""

from pydantic import BaseModel, Field

from invoicebox.models.user import Plan, ReminderSettings


class SettingsUpdate(BaseModel):
    """Schema for updating account settings.

    Omitted fields are left unchanged. Reminder offsets are days relative
    to the invoice due date; 0 or null turns that reminder off.
    """

    company_name: str | None = Field(None, max_length=255)
    days_before: int | None = Field(None, ge=0, le=365)
    on_due_date: bool | None = None
    days_after_1: int | None = Field(None, ge=0, le=365)
    days_after_2: int | None = Field(None, ge=0, le=365)
    days_after_3: int | None = Field(None, ge=0, le=365)


class SettingsResponse(BaseModel):
    """Account settings as seen by the vendor."""

    company_name: str | None
    plan: Plan
    reminder_settings: ReminderSettings
