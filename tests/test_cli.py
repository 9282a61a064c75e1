import pytest

from daily_update.__main__ import main

CONFIG_KEYS = (
    "TODO_VAULT_PATH",
    "TODO_FILE_PREFIX",
    "TODO_RUN_ON_STARTUP",
    "TODO_COMMIT_CHANGES",
    "TODO_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    for key in CONFIG_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def test_once_updates_vault(monkeypatch, tmp_path):
    todo = tmp_path / "ToDo.md"
    todo.write_text("- [ ] Report [🎯:: /] [⏳:: 2024-01-07]\n", encoding="utf-8")
    monkeypatch.setenv("TODO_VAULT_PATH", str(tmp_path))

    assert main(["--once", "--today", "2024-01-07"]) == 0
    assert todo.read_text(encoding="utf-8") == "- [ ] Report [🎯:: 1] [⏳:: 2024-01-07]\n"


def test_once_rejects_bad_today(monkeypatch, tmp_path):
    monkeypatch.setenv("TODO_VAULT_PATH", str(tmp_path))

    assert main(["--once", "--today", "2024-02-31"]) == 1


def test_once_without_config_fails():
    assert main(["--once"]) == 1


def test_once_reports_failure(monkeypatch, tmp_path):
    (tmp_path / "ToDo.md").write_bytes(b"\xff\xfe")
    monkeypatch.setenv("TODO_VAULT_PATH", str(tmp_path))

    assert main(["--once", "--today", "2024-01-07"]) == 1
