"""Vendor account administration for InvoiceBox.

Commands:
    add       Add a new account
    list      List all accounts
    plan      Change an account's plan
    disable   Disable an account
    enable    Enable an account
    passwd    Change an account's password
"""

import argparse
import asyncio
import sys
from getpass import getpass

from invoicebox.database import close_db, init_db
from invoicebox.models.user import Plan, User
from invoicebox.services.auth import get_password_hash, get_user_by_email


async def _require_user(email: str) -> User:
    user = await get_user_by_email(email)
    if user is None:
        print(f"Error: User '{email}' not found.")
        sys.exit(1)
    return user


async def add_user(
    email: str,
    password: str,
    company_name: str | None = None,
    plan: Plan = Plan.FREE,
) -> None:
    """Add a new vendor account."""
    if await get_user_by_email(email):
        print(f"Error: User '{email}' already exists.")
        sys.exit(1)

    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        company_name=company_name,
        plan=plan,
    )
    await user.insert()
    print(f"User '{email}' created on the {plan.value} plan.")


async def list_users() -> None:
    """List all vendor accounts."""
    users = await User.find_all().sort(+User.email).to_list()
    if not users:
        print("No users found.")
        return

    print(f"{'Email':<32} {'Company':<24} {'Plan':<8} {'Active':<6} {'Last Login':<16}")
    print("-" * 90)
    for user in users:
        last_login = user.last_login.strftime("%Y-%m-%d %H:%M") if user.last_login else "Never"
        active = "Yes" if user.is_active else "No"
        company = user.company_name or ""
        print(f"{user.email:<32} {company:<24} {user.plan.value:<8} {active:<6} {last_login:<16}")


async def set_plan(email: str, plan: Plan) -> None:
    """Move an account to another plan. Existing clients are never removed."""
    user = await _require_user(email)
    user.plan = plan
    await user.save()
    print(f"User '{email}' is now on the {plan.value} plan.")


async def set_active(email: str, active: bool) -> None:
    """Enable or disable an account."""
    user = await _require_user(email)
    state = "enabled" if active else "disabled"
    if user.is_active == active:
        print(f"User '{email}' is already {state}.")
        return
    user.is_active = active
    await user.save()
    print(f"User '{email}' has been {state}.")


async def change_password(email: str, password: str) -> None:
    """Change an account's password."""
    user = await _require_user(email)
    user.hashed_password = get_password_hash(password)
    await user.save()
    print(f"Password for user '{email}' has been updated.")


def get_password_interactive(confirm: bool = True) -> str:
    """Get password interactively from user."""
    password = getpass("Password: ")
    if not password:
        print("Error: Password cannot be empty.")
        sys.exit(1)

    if confirm and getpass("Confirm password: ") != password:
        print("Error: Passwords do not match.")
        sys.exit(1)

    return password


async def _run(coro) -> None:
    await init_db()
    try:
        await coro
    finally:
        await close_db()


def main() -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Account administration for InvoiceBox",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")
    plans = [p.value for p in Plan]

    add_parser = subparsers.add_parser("add", help="Add a new account")
    add_parser.add_argument("email", help="Login email")
    add_parser.add_argument("--company", "-c", help="Company name shown in reminder emails")
    add_parser.add_argument("--plan", choices=plans, default=Plan.FREE.value, help="Plan (default: FREE)")
    add_parser.add_argument("--password", "-p", help="Password (will prompt if not provided)")

    subparsers.add_parser("list", help="List all accounts")

    plan_parser = subparsers.add_parser("plan", help="Change an account's plan")
    plan_parser.add_argument("email")
    plan_parser.add_argument("plan", choices=plans)

    for name, help_text in (("disable", "Disable an account"), ("enable", "Enable an account")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("email")

    passwd_parser = subparsers.add_parser("passwd", help="Change an account's password")
    passwd_parser.add_argument("email")
    passwd_parser.add_argument("--password", "-p", help="New password (will prompt if not provided)")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "add":
            password = args.password or get_password_interactive()
            asyncio.run(_run(add_user(args.email, password, args.company, Plan(args.plan))))

        elif args.command == "list":
            asyncio.run(_run(list_users()))

        elif args.command == "plan":
            asyncio.run(_run(set_plan(args.email, Plan(args.plan))))

        elif args.command in ("disable", "enable"):
            asyncio.run(_run(set_active(args.email, args.command == "enable")))

        elif args.command == "passwd":
            password = args.password or get_password_interactive()
            asyncio.run(_run(change_password(args.email, password)))

    except KeyboardInterrupt:
        print("\nAborted.")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
