"""Plan limits and feature gates."""

from typing import Any

from invoicebox.models.invoice import ReminderType
from invoicebox.models.user import Plan

# Maximum number of clients per plan; None means unlimited
PLAN_CLIENT_LIMITS: dict[Plan, int | None] = {
    Plan.FREE: 3,
    Plan.STARTER: 50,
    Plan.PRO: None,
}

PLAN_LABELS: dict[Plan, str] = {
    Plan.FREE: "Free",
    Plan.STARTER: "Starter",
    Plan.PRO: "Pro",
}

# Reminder types each plan may send automatically
PLAN_REMINDER_TYPES: dict[Plan, frozenset[ReminderType]] = {
    Plan.FREE: frozenset(),
    Plan.STARTER: frozenset({ReminderType.AFTER_1}),
    Plan.PRO: frozenset(ReminderType),
}

# Plans allowed to upload a branding logo
BRANDING_PLANS = frozenset({Plan.PRO})


class QuotaExceededError(Exception):
    """Raised when adding clients would take an account past its plan limit."""

    def __init__(self, plan: Plan, limit: int, current: int, adding: int) -> None:
        self.plan = plan
        self.limit = limit
        self.current = current
        self.adding = adding
        super().__init__(self.message)

    @property
    def message(self) -> str:
        label = PLAN_LABELS[self.plan]
        if self.adding == 1:
            return (
                f"{label} Plan limit reached ({self.limit} clients). "
                "Please upgrade to add more."
            )
        return (
            f"Import exceeds {label} Plan limit (Max {self.limit} clients). "
            f"You have {self.current} and are trying to add {self.adding}."
        )


def normalize_plan(value: Any) -> Plan:
    """Coerce a stored plan value to a Plan, defaulting to FREE."""
    if isinstance(value, Plan):
        return value
    if isinstance(value, str):
        try:
            return Plan(value.strip().upper())
        except ValueError:
            pass
    return Plan.FREE


def client_limit(plan: Any) -> int | None:
    """Return the client ceiling of a plan, None if unlimited."""
    return PLAN_CLIENT_LIMITS[normalize_plan(plan)]


def check_quota(plan: Any, current: int, adding: int) -> None:
    """Ensure ``current + adding`` clients stay within the plan ceiling.

    The check is all or nothing: callers must not insert a partial batch
    when it fails.

    Raises:
        QuotaExceededError: If the new total would exceed the ceiling.
    """
    plan = normalize_plan(plan)
    limit = PLAN_CLIENT_LIMITS[plan]
    if limit is not None and current + adding > limit:
        raise QuotaExceededError(plan, limit, current, adding)


def can_upload_logo(plan: Any) -> bool:
    """Return True if the plan includes custom branding."""
    return normalize_plan(plan) in BRANDING_PLANS


def allowed_reminder_types(plan: Any) -> frozenset[ReminderType]:
    """Return the reminder types a plan sends automatically."""
    return PLAN_REMINDER_TYPES[normalize_plan(plan)]


# Maximum number of invoices per plan; None means unlimited
PLAN_INVOICE_LIMITS: dict[Plan, int | None] = {
    Plan.FREE: 3,
    Plan.STARTER: None,
    Plan.PRO: None,
}

# Reminder schedule fields only PRO accounts may turn on
ADVANCED_REMINDER_FIELDS = ("days_before", "on_due_date", "days_after_2", "days_after_3")


class PlanFeatureError(Exception):
    """Raised when an account asks for something its plan does not include."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


def check_invoice_quota(plan: Any, current: int) -> None:
    """Ensure one more invoice fits within the plan ceiling.

    Raises:
        PlanFeatureError: If the plan's invoice limit is already reached.
    """
    plan = normalize_plan(plan)
    limit = PLAN_INVOICE_LIMITS[plan]
    if limit is not None and current >= limit:
        raise PlanFeatureError(
            f"{PLAN_LABELS[plan]} Plan limit reached ({limit} invoices). "
            "Please upgrade to create more."
        )


def check_reminder_settings(plan: Any, requested: dict[str, Any]) -> None:
    """Reject reminder schedule changes the plan does not include.

    FREE and STARTER accounts may only set the first after-due reminder;
    any truthy advanced field in ``requested`` is refused.

    Raises:
        PlanFeatureError: If an advanced reminder is requested below PRO.
    """
    plan = normalize_plan(plan)
    if plan == Plan.PRO:
        return
    if not any(requested.get(name) for name in ADVANCED_REMINDER_FIELDS):
        return
    if plan == Plan.FREE:
        raise PlanFeatureError(
            "Free plan allows only 1 basic reminder (after due date). "
            "Upgrade to Pro for advanced automation."
        )
    raise PlanFeatureError(
        "Starter plan allows only 1 basic reminder (after due date). "
        "Upgrade to Pro for advanced automation (before/on due date)."
    )
