"""
Tests for the destructive-action guard and database verbs.
"""

import pytest
from datetime import datetime
from unittest.mock import Mock, patch

import click

from stackctl.database import (
    backup_filename, next_backup_path, db_backup, db_reset, db_shell,
)
from stackctl.guard import DestructiveActionGuard, GuardOutcome, is_affirmative, prompt_operator

DEV_COMPOSE = ["docker", "compose", "-f", "docker/compose.development.yaml"]


class TestGuard:
    """Test confirmation gating."""

    @pytest.mark.parametrize("answer", ["y", "Y", " y "])
    def test_yes_runs_action_once(self, answer):
        action = Mock(return_value=0)
        guard = DestructiveActionGuard(confirm=lambda question: answer)

        outcome, status = guard.run("Delete all data?", action)

        assert outcome == GuardOutcome.COMPLETED
        assert status == 0
        action.assert_called_once_with()

    @pytest.mark.parametrize("answer", ["", "n", "N", "yes", "no", "x", None])
    def test_anything_else_declines(self, answer):
        action = Mock(return_value=0)
        guard = DestructiveActionGuard(confirm=lambda question: answer)

        outcome, status = guard.run("Delete all data?", action)

        assert outcome == GuardOutcome.DECLINED
        assert status == 0
        action.assert_not_called()

    def test_action_failure_propagated(self):
        guard = DestructiveActionGuard(confirm=lambda question: "y")
        outcome, status = guard.run("Delete?", lambda: 5)

        assert outcome == GuardOutcome.COMPLETED
        assert status == 5

    def test_question_passed_to_provider(self):
        confirm = Mock(return_value="n")
        DestructiveActionGuard(confirm=confirm).run("Delete all volumes?", Mock())
        confirm.assert_called_once_with("Delete all volumes?")

    def test_is_affirmative(self):
        assert is_affirmative("Y")
        assert not is_affirmative("")

    @patch('click.prompt', side_effect=click.Abort)
    def test_closed_stdin_declines(self, mock_prompt):
        assert prompt_operator("Delete all data?") == ""

        action = Mock(return_value=0)
        outcome, status = DestructiveActionGuard().run("Delete all data?", action)

        assert outcome == GuardOutcome.DECLINED
        assert status == 0
        action.assert_not_called()


class TestBackup:
    """Test timestamped database backups."""

    def test_backup_filename(self):
        assert backup_filename(datetime(2024, 3, 9, 7, 5, 1)) == "backup_20240309_070501.archive"

    def test_backup_writes_archive(self, dispatcher, runner, credentials, tmp_path):
        def fake_run(argv, stdout=None, **kwargs):
            stdout.write(b"ARCHIVE")
            return 0

        runner.run.side_effect = fake_run
        backup_dir = tmp_path / "backups"

        status, archive = db_backup(dispatcher, credentials, backup_dir,
                                    clock=lambda: datetime(2024, 1, 2, 3, 4, 5))

        assert status == 0
        assert backup_dir.is_dir()
        assert archive == backup_dir / "backup_20240102_030405.archive"
        assert archive.read_bytes() == b"ARCHIVE"

        argv = runner.run.call_args.args[0]
        assert argv == DEV_COMPOSE + [
            "exec", "-T", "mongo", "mongodump",
            "--username=root", "--password=s3cr3t-pw", "--db=appdb", "--archive",
        ]
        assert "s3cr3t-pw" in runner.run.call_args.kwargs["secrets"]

    def test_two_backups_distinct_seconds(self, dispatcher, runner, credentials, tmp_path):
        """Backups taken in different seconds never collide or overwrite."""
        payloads = iter([b"first", b"second"])

        def fake_run(argv, stdout=None, **kwargs):
            stdout.write(next(payloads))
            return 0

        runner.run.side_effect = fake_run
        moments = iter([datetime(2024, 1, 2, 3, 4, 5), datetime(2024, 1, 2, 3, 4, 6)])
        clock = lambda: next(moments)

        _, first = db_backup(dispatcher, credentials, tmp_path, clock=clock)
        _, second = db_backup(dispatcher, credentials, tmp_path, clock=clock)

        assert first != second
        assert first.read_bytes() == b"first"
        assert second.read_bytes() == b"second"
        assert len(list(tmp_path.glob("backup_*.archive"))) == 2

    def test_same_second_gets_suffix(self, tmp_path):
        moment = datetime(2024, 1, 2, 3, 4, 5)
        (tmp_path / backup_filename(moment)).write_bytes(b"old")

        path = next_backup_path(tmp_path, moment)
        assert path.name == "backup_20240102_030405_1.archive"

    def test_failed_dump_removes_archive(self, dispatcher, runner, credentials, tmp_path):
        runner.run.return_value = 2

        status, archive = db_backup(dispatcher, credentials, tmp_path,
                                    clock=lambda: datetime(2024, 1, 2, 3, 4, 5))

        assert status == 2
        assert archive is None
        assert list(tmp_path.iterdir()) == []

    def test_interrupted_dump_removes_archive(self, dispatcher, runner, credentials, tmp_path):
        """Ctrl+C mid-dump leaves no truncated archive behind."""
        def fake_run(argv, stdout=None, **kwargs):
            stdout.write(b"partial")
            raise KeyboardInterrupt

        runner.run.side_effect = fake_run

        with pytest.raises(KeyboardInterrupt):
            db_backup(dispatcher, credentials, tmp_path,
                      clock=lambda: datetime(2024, 1, 2, 3, 4, 5))

        assert list(tmp_path.iterdir()) == []


class TestReset:
    """Test the guarded database drop."""

    def test_reset_confirmed(self, dispatcher, runner, credentials):
        guard = DestructiveActionGuard(confirm=lambda question: "y")

        outcome, status = db_reset(dispatcher, credentials, guard)

        assert outcome == GuardOutcome.COMPLETED
        assert status == 0
        argv = runner.run.call_args.args[0]
        assert argv == DEV_COMPOSE + [
            "exec", "mongo", "mongosh", "-u", "root", "-p", "s3cr3t-pw",
            "--eval", "db.getSiblingDB('appdb').dropDatabase()",
        ]

    def test_reset_declined(self, dispatcher, runner, credentials):
        guard = DestructiveActionGuard(confirm=lambda question: "")

        outcome, status = db_reset(dispatcher, credentials, guard)

        assert outcome == GuardOutcome.DECLINED
        assert status == 0
        runner.run.assert_not_called()

    def test_mongo_shell(self, dispatcher, runner, credentials):
        db_shell(dispatcher, credentials)
        runner.run.assert_called_once_with(
            DEV_COMPOSE + ["exec", "mongo", "mongosh", "-u", "root", "-p", "s3cr3t-pw"],
            secrets=["root", "s3cr3t-pw"],
        )
