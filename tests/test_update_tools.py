import logging
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from daily_update import update_tools
from daily_update.config import AppConfig
from daily_update.errors import UpdateError
from daily_update.main import create_app
from daily_update.notices import (
    PRIORITIES_UPDATED,
    STREAKS_UPDATED,
    UPDATE_FAILED_NOTICE,
    NoticeBoard,
)

TODO_TEXT = "\n".join(
    [
        "- [ ] Report [🎯:: /] [⏳:: 2024-01-07]",
        "- [x] Gym 🔁 [🎯:: 1] ✅ 2024-01-06",
        "  - streak:: 3",
        "  - streak_start:: 2024-01-04",
        "",
    ]
)


def _config(vault_path, **overrides):
    values = {
        "vault_path": vault_path,
        "file_prefix": "ToDo",
        "run_on_startup": False,
        "commit_changes": False,
        "log_level": logging.INFO,
    }
    values.update(overrides)
    return AppConfig(**values)


def _build_request(vault_path, **overrides):
    state = SimpleNamespace(config=_config(vault_path, **overrides), notices=NoticeBoard())
    return SimpleNamespace(app=SimpleNamespace(state=state))


def test_run_daily_update_with_today_override(tmp_path):
    todo = tmp_path / "ToDo.md"
    todo.write_text(TODO_TEXT, encoding="utf-8")

    result = update_tools.run_daily_update({"today": "2024-01-07"}, _build_request(tmp_path))

    assert result["ok"] is True
    data = result["data"]
    assert data["priorities"]["filesChanged"] == ["ToDo.md"]
    assert data["streaks"]["linesChanged"] == 2
    assert [notice["message"] for notice in data["notices"]] == [
        PRIORITIES_UPDATED,
        STREAKS_UPDATED,
    ]
    assert todo.read_text(encoding="utf-8") == "\n".join(
        [
            "- [ ] Report [🎯:: 1] [⏳:: 2024-01-07]",
            "- [ ] Gym 🔁 [🎯:: 1]",
            "  - streak:: 4",
            "  - streak_start:: 2024-01-04",
            "",
        ]
    )


def test_single_pass_tools(tmp_path):
    todo = tmp_path / "ToDo.md"
    todo.write_text(TODO_TEXT, encoding="utf-8")
    request = _build_request(tmp_path)

    priorities = update_tools.update_priorities({"today": "2024-01-07"}, request)

    assert priorities["data"]["operation"] == "update_priorities"
    assert "- [x] Gym" in todo.read_text(encoding="utf-8")

    streaks = update_tools.update_streaks({"today": "2024-01-07"}, request)

    assert streaks["data"]["operation"] == "update_streaks"
    assert [notice["message"] for notice in streaks["data"]["notices"]] == [STREAKS_UPDATED]
    assert "- [ ] Gym" in todo.read_text(encoding="utf-8")


def test_run_daily_update_rejects_unknown_fields(tmp_path):
    with pytest.raises(UpdateError) as excinfo:
        update_tools.run_daily_update({"when": "now"}, _build_request(tmp_path))

    assert excinfo.value.error.code == "UNKNOWN_FIELD"
    assert excinfo.value.error.details == {"fields": ["when"]}


def test_run_daily_update_rejects_bad_date(tmp_path):
    with pytest.raises(UpdateError) as excinfo:
        update_tools.run_daily_update({"today": "07/01/2024"}, _build_request(tmp_path))

    assert excinfo.value.error.code == "INVALID_DATE"


def test_run_daily_update_rejects_non_object_payload(tmp_path):
    with pytest.raises(UpdateError) as excinfo:
        update_tools.run_daily_update(["today"], _build_request(tmp_path))

    assert excinfo.value.error.code == "INVALID_TYPE"


def test_run_daily_update_failure_posts_notice(tmp_path):
    (tmp_path / "ToDo.md").write_bytes(b"\xff\xfe not utf-8")
    request = _build_request(tmp_path)

    with pytest.raises(UpdateError) as excinfo:
        update_tools.run_daily_update({"today": "2024-01-07"}, request)

    assert excinfo.value.error.code == "UPDATE_FAILED"
    notices = request.app.state.notices.recent()
    assert [notice.message for notice in notices] == [UPDATE_FAILED_NOTICE]


def test_list_notices_limit(tmp_path):
    request = _build_request(tmp_path)
    for index in range(5):
        request.app.state.notices.post(f"notice {index}")

    result = update_tools.list_notices({"limit": 2}, request)

    assert [notice["message"] for notice in result["data"]["notices"]] == [
        "notice 3",
        "notice 4",
    ]

    with pytest.raises(UpdateError) as excinfo:
        update_tools.list_notices({"limit": 0}, request)
    assert excinfo.value.error.code == "INVALID_TYPE"


def test_read_activity_log_tool(tmp_path):
    (tmp_path / "ToDo.md").write_text(TODO_TEXT, encoding="utf-8")
    request = _build_request(tmp_path)
    update_tools.run_daily_update({"today": "2024-01-07"}, request)

    result = update_tools.read_activity_log({"limit": 1}, request)

    entries = result["data"]["entries"]
    assert len(entries) == 1
    assert entries[0]["operation"] == "update_streaks"

    with pytest.raises(UpdateError) as excinfo:
        update_tools.read_activity_log({"since": "yesterday"}, request)
    assert excinfo.value.error.code == "INVALID_DATE"


def test_tools_require_loaded_config(tmp_path):
    request = SimpleNamespace(app=SimpleNamespace(state=SimpleNamespace()))

    with pytest.raises(UpdateError) as excinfo:
        update_tools.read_activity_log({}, request)

    assert excinfo.value.error.code == "NOT_READY"


def test_startup_runs_update_and_serves_tools(monkeypatch, tmp_path):
    todo = tmp_path / "ToDo.md"
    todo.write_text("- [ ] Overdue [🎯:: /] [⏳:: 2000-01-01]\n", encoding="utf-8")
    monkeypatch.setenv("TODO_VAULT_PATH", str(tmp_path))
    monkeypatch.setenv("TODO_RUN_ON_STARTUP", "true")
    monkeypatch.delenv("TODO_COMMIT_CHANGES", raising=False)
    monkeypatch.delenv("TODO_FILE_PREFIX", raising=False)
    monkeypatch.delenv("TODO_LOG_LEVEL", raising=False)
    monkeypatch.chdir(tmp_path)

    with TestClient(create_app()) as client:
        assert todo.read_text(encoding="utf-8") == "- [ ] Overdue [🎯:: 1] [⏳:: 2000-01-01]\n"

        listed = client.post("/tool:list_notices", json={})
        assert listed.status_code == 200
        assert [notice["message"] for notice in listed.json()["data"]["notices"]] == [
            PRIORITIES_UPDATED,
            STREAKS_UPDATED,
        ]

        rejected = client.post("/tool:run_daily_update", json={"today": "soon"})
        assert rejected.status_code == 400
        assert rejected.json()["ok"] is False
        assert rejected.json()["error"]["code"] == "INVALID_DATE"


def test_tool_response_ignores_notices_posted_concurrently(tmp_path):
    (tmp_path / "ToDo.md").write_text(TODO_TEXT, encoding="utf-8")
    request = _build_request(tmp_path)
    board = request.app.state.notices
    board.post("Earlier notice")

    def interleaved(updater):
        summary = updater.update_priorities()
        board.post("Notice from another request")
        return summary

    result = update_tools._run_tool(
        {"today": "2024-01-07"}, request, "update_priorities", interleaved
    )

    assert [notice["message"] for notice in result["data"]["notices"]] == [PRIORITIES_UPDATED]
    assert len(board.recent()) == 3
