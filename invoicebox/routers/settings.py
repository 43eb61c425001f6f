"""Account settings endpoints: company name and payment reminder schedule."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, HTTPException, status

from invoicebox.models.user import ReminderSettings
from invoicebox.schemas.settings import SettingsResponse, SettingsUpdate
from invoicebox.services.auth import RequireAuth
from invoicebox.services.plans import PlanFeatureError, check_reminder_settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _settings_response(user) -> SettingsResponse:
    return SettingsResponse(
        company_name=user.company_name,
        plan=user.plan,
        reminder_settings=user.reminder_settings or ReminderSettings(),
    )


@router.get("", response_model=SettingsResponse)
async def get_settings(current_user: RequireAuth) -> SettingsResponse:
    """Return the current user's settings."""
    return _settings_response(current_user)


@router.put("", response_model=SettingsResponse)
async def update_settings(
    settings_data: SettingsUpdate,
    current_user: RequireAuth,
) -> SettingsResponse:
    """Update the company name and reminder schedule.

    FREE and STARTER accounts may only set the first after-due reminder.
    """
    changes = settings_data.model_dump(exclude_unset=True)
    try:
        check_reminder_settings(current_user.plan, changes)
    except PlanFeatureError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=e.message)

    if "company_name" in changes:
        current_user.company_name = changes.pop("company_name")

    if changes:
        if "on_due_date" in changes:
            changes["on_due_date"] = bool(changes["on_due_date"])
        current = current_user.reminder_settings or ReminderSettings()
        current_user.reminder_settings = ReminderSettings(**{**current.model_dump(), **changes})

    current_user.updated_at = datetime.now(timezone.utc)
    await current_user.save()

    logger.info("Updated settings for user %s", current_user.id)
    return _settings_response(current_user)
