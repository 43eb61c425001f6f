"""Tests for the account settings endpoints."""

import pytest
from httpx import AsyncClient

from invoicebox.models.user import Plan, ReminderSettings


class TestGetSettings:
    @pytest.mark.asyncio
    async def test_defaults_when_never_set(self, client: AsyncClient) -> None:
        response = await client.get("/api/settings")

        assert response.status_code == 200
        data = response.json()
        assert data["company_name"] == "Vendor SRL"
        assert data["plan"] == "FREE"
        assert data["reminder_settings"] == {
            "days_before": None,
            "on_due_date": False,
            "days_after_1": None,
            "days_after_2": None,
            "days_after_3": None,
        }

    @pytest.mark.asyncio
    async def test_requires_authentication(self, anonymous_client: AsyncClient) -> None:
        response = await anonymous_client.get("/api/settings")
        assert response.status_code == 401


class TestUpdateSettings:
    @pytest.mark.asyncio
    async def test_pro_sets_full_schedule(self, client: AsyncClient, user) -> None:
        user.plan = Plan.PRO
        body = {
            "days_before": 3,
            "on_due_date": True,
            "days_after_1": 1,
            "days_after_2": 7,
            "days_after_3": 14,
        }

        response = await client.put("/api/settings", json=body)

        assert response.status_code == 200
        assert response.json()["reminder_settings"] == body
        assert user.reminder_settings == ReminderSettings(**body)
        assert user.save_calls == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("plan", [Plan.FREE, Plan.STARTER])
    async def test_basic_plans_may_set_first_after_due_reminder(self, client: AsyncClient, user, plan) -> None:
        user.plan = plan

        response = await client.put("/api/settings", json={"days_after_1": 2})

        assert response.status_code == 200
        assert user.reminder_settings.days_after_1 == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "plan,message",
        [
            (
                Plan.FREE,
                "Free plan allows only 1 basic reminder (after due date). "
                "Upgrade to Pro for advanced automation.",
            ),
            (
                Plan.STARTER,
                "Starter plan allows only 1 basic reminder (after due date). "
                "Upgrade to Pro for advanced automation (before/on due date).",
            ),
        ],
    )
    @pytest.mark.parametrize(
        "body",
        [{"days_before": 3}, {"on_due_date": True}, {"days_after_2": 7}, {"days_after_3": 14}],
    )
    async def test_advanced_reminders_need_pro(self, client: AsyncClient, user, plan, message, body) -> None:
        user.plan = plan

        response = await client.put("/api/settings", json=body)

        assert response.status_code == 403
        assert response.json()["detail"] == message
        assert user.reminder_settings is None
        assert user.save_calls == 0

    @pytest.mark.asyncio
    async def test_turning_advanced_reminders_off_is_allowed(self, client: AsyncClient, user) -> None:
        user.plan = Plan.STARTER
        user.reminder_settings = ReminderSettings(days_before=3, days_after_1=1)

        response = await client.put("/api/settings", json={"days_before": 0, "on_due_date": None})

        assert response.status_code == 200
        assert user.reminder_settings.days_before == 0
        assert user.reminder_settings.on_due_date is False
        assert user.reminder_settings.days_after_1 == 1

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, client: AsyncClient, user) -> None:
        user.plan = Plan.PRO
        user.reminder_settings = ReminderSettings(days_before=5, days_after_1=1)

        response = await client.put("/api/settings", json={"company_name": "New Name SRL"})

        assert response.status_code == 200
        assert user.company_name == "New Name SRL"
        assert user.reminder_settings == ReminderSettings(days_before=5, days_after_1=1)

    @pytest.mark.asyncio
    async def test_negative_offset_rejected(self, client: AsyncClient) -> None:
        response = await client.put("/api/settings", json={"days_after_1": -1})
        assert response.status_code == 422
