"""Tests for Celery backfill task."""
import pytest

from postvault.workers import tasks


def test_backfill_task_returns_counts(monkeypatch):
    calls = []

    async def fake_run_backfill(user_id, progress_callback=None):
        calls.append(user_id)
        return {"processed": 2, "failed": 0, "skipped": 1}

    monkeypatch.setattr(tasks, "run_backfill", fake_run_backfill)

    result = tasks.backfill_entities_task("user-1")

    assert calls == ["user-1"]
    assert result == {"status": "completed", "processed": 2, "failed": 0, "skipped": 1}


def test_backfill_task_propagates_non_transient_errors(monkeypatch):
    async def broken_run_backfill(user_id, progress_callback=None):
        raise ValueError("OpenAI API key is required")

    monkeypatch.setattr(tasks, "run_backfill", broken_run_backfill)

    with pytest.raises(ValueError):
        tasks.backfill_entities_task("user-1")
