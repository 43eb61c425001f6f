"""Tests for CLI tools: server control and account administration."""

import sys
from unittest.mock import AsyncMock, patch

import pytest

from conftest import FakeUser
from invoicebox.cli import server
from invoicebox.models.user import Plan
from invoicebox.services.auth import verify_password


class TestServerControl:
    """Tests for invoicebox-server helpers."""

    def test_build_command(self):
        cmd = server.build_command("127.0.0.1", 8123)
        assert cmd[:4] == [sys.executable, "-m", "uvicorn", "invoicebox.main:app"]
        assert cmd[cmd.index("--port") + 1] == "8123"
        assert "--reload" not in cmd

    def test_build_command_with_reload_skips_workers(self):
        cmd = server.build_command("127.0.0.1", 8000, reload=True)
        assert "--reload" in cmd
        assert "--workers" not in cmd

    def test_stale_pid_file_is_removed(self, tmp_path, monkeypatch):
        pid_path = tmp_path / "invoicebox.pid"
        pid_path.write_text("not-a-pid")
        monkeypatch.setattr(server, "pid_file", lambda: pid_path)

        assert server.get_pid() is None
        assert not pid_path.exists()

    def test_missing_pid_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(server, "pid_file", lambda: tmp_path / "missing.pid")
        assert server.get_pid() is None

    def test_main_without_command_prints_help(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["invoicebox-server"])
        assert server.main() == 1
        assert "usage" in capsys.readouterr().out.lower()


class TestUserAdmin:
    """Tests for invoicebox-admin commands on an existing account."""

    @pytest.mark.asyncio
    async def test_add_duplicate_user_fails(self, capsys):
        from invoicebox.cli.user_admin import add_user

        with patch(
            "invoicebox.cli.user_admin.get_user_by_email", AsyncMock(return_value=FakeUser())
        ):
            with pytest.raises(SystemExit) as exc_info:
                await add_user("vendor@example.com", "password123")
        assert exc_info.value.code == 1
        assert "already exists" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_missing_user_fails(self):
        from invoicebox.cli.user_admin import set_plan

        with patch("invoicebox.cli.user_admin.get_user_by_email", AsyncMock(return_value=None)):
            with pytest.raises(SystemExit) as exc_info:
                await set_plan("nobody@example.com", Plan.PRO)
        assert exc_info.value.code == 1

    @pytest.mark.asyncio
    async def test_set_plan(self, capsys):
        from invoicebox.cli.user_admin import set_plan

        user = FakeUser()
        with patch("invoicebox.cli.user_admin.get_user_by_email", AsyncMock(return_value=user)):
            await set_plan(user.email, Plan.STARTER)

        assert user.plan == Plan.STARTER
        assert user.save_calls == 1
        assert "STARTER" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_disable_and_enable(self, capsys):
        from invoicebox.cli.user_admin import set_active

        user = FakeUser()
        with patch("invoicebox.cli.user_admin.get_user_by_email", AsyncMock(return_value=user)):
            await set_active(user.email, False)
            assert user.is_active is False
            await set_active(user.email, False)
            await set_active(user.email, True)

        assert user.is_active is True
        assert user.save_calls == 2
        out = capsys.readouterr().out
        assert "disabled" in out
        assert "already disabled" in out
        assert "enabled" in out

    @pytest.mark.asyncio
    async def test_change_password(self, capsys):
        from invoicebox.cli.user_admin import change_password

        user = FakeUser()
        user.hashed_password = "old"
        with patch("invoicebox.cli.user_admin.get_user_by_email", AsyncMock(return_value=user)):
            await change_password(user.email, "newpassword123")

        assert verify_password("newpassword123", user.hashed_password)
        assert "updated" in capsys.readouterr().out.lower()
