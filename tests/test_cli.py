"""
Tests for the asum command line entry point.

Run with:
    pytest tests/test_cli.py -v
"""

import logging
from types import SimpleNamespace

import pytest

from asum import __version__
from asum.cli import main as cli_main
from asum.cli.main import _setup_logging
from asum.logging_config import configure_logging


CONFIG_TEMPLATE = """
[general]
active_provider = "ollama"
max_diff_length = 1000

[ai_params]
num_predict = 50
temperature = 0.2
top_p = 0.9
timeout = 5

[ollama]
model = "llama3"
url = "{url}/api/chat"
"""


@pytest.fixture(autouse=True)
def workspace(tmp_path, monkeypatch):
    """Run every CLI test in an empty directory with a throwaway home."""
    home = tmp_path / "home"
    home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.setattr("pathlib.Path.home", lambda: home)
    monkeypatch.chdir(work)
    # dictConfig would drop the caplog handler from the root logger
    monkeypatch.setattr(cli_main, "_setup_logging", lambda verbose: None)

    root = logging.getLogger()
    saved_handlers, saved_level = root.handlers[:], root.level
    yield work
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def staged(monkeypatch):
    """Replace git extraction with a fixed diff. Set .diff to change it."""
    state = SimpleNamespace(diff="diff --git a/app.py b/app.py\n+print('hi')\n", calls=[])

    def _collect(self, extensions, max_length):
        state.calls.append((extensions, max_length))
        return state.diff

    monkeypatch.setattr(cli_main.GitAnalyzer, "collect", _collect)
    return state


@pytest.fixture
def clipboard(monkeypatch):
    copied = []

    def _copy(text):
        copied.append(text)
        return True, ""

    monkeypatch.setattr(cli_main, "copy_to_clipboard", _copy)
    return copied


# ---------------------------------------------------------------------------
# asum verify
# ---------------------------------------------------------------------------

class TestVerifyCommand:

    def test_missing_file(self, capsys):
        assert cli_main.main(["verify"]) == 1
        assert "asum.toml not found" in capsys.readouterr().err

    def test_valid_file(self, workspace, capsys):
        (workspace / "asum.toml").write_text(CONFIG_TEMPLATE.format(url="http://localhost:11434"))

        assert cli_main.main(["verify"]) == 0
        assert "syntax is valid" in capsys.readouterr().out

    def test_invalid_file(self, workspace, capsys):
        (workspace / "asum.toml").write_text("invalid = [")

        assert cli_main.main(["verify"]) == 1
        assert "syntax error" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# Argument handling
# ---------------------------------------------------------------------------

class TestArgs:

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            cli_main.main(["--version"])
        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out

    def test_unknown_command(self):
        with pytest.raises(SystemExit) as exc_info:
            cli_main.main(["unknown"])
        assert exc_info.value.code == 2

    def test_log_file_created(self, workspace):
        _setup_logging(verbose=False)
        logging.getLogger("asum.test").info("started")
        assert (workspace.parent / "home" / ".asum" / "logs" / "asum.log").exists()


# ---------------------------------------------------------------------------
# Generation flow
# ---------------------------------------------------------------------------

class TestGenerateFlow:

    def test_no_config(self, caplog):
        assert cli_main.main([]) == 1
        assert "Failed to load configuration" in caplog.text

    def test_prints_and_copies_message(self, workspace, fake_server, staged, clipboard, capsys):
        (workspace / "asum.toml").write_text(CONFIG_TEMPLATE.format(url=fake_server.url))
        fake_server.respond((200, {"message": {"content": "feat(app): greet user\n\n- print hi"}}))

        assert cli_main.main([]) == 0

        out = capsys.readouterr().out
        assert out == "feat(app): greet user\n- print hi\n"
        assert clipboard == ["feat(app): greet user\n- print hi"]
        assert staged.calls[0][1] == 1000
        sent = fake_server.requests[0]["json"]["messages"][1]["content"]
        assert "+print('hi')" in sent

    def test_no_copy(self, workspace, fake_server, staged, clipboard):
        (workspace / "asum.toml").write_text(CONFIG_TEMPLATE.format(url=fake_server.url))
        fake_server.respond((200, {"message": {"content": "fix: typo"}}))

        assert cli_main.main(["--no-copy"]) == 0
        assert clipboard == []

    def test_logs_loaded_config_path(self, workspace, fake_server, staged, clipboard, caplog):
        (workspace / "asum.toml").write_text(CONFIG_TEMPLATE.format(url=fake_server.url))
        fake_server.respond((200, {"message": {"content": "fix: typo"}}))
        caplog.set_level(logging.DEBUG, logger="asum")

        assert cli_main.main([]) == 0
        assert f"Using configuration {workspace / 'asum.toml'}" in caplog.text

    def test_nothing_staged(self, workspace, fake_server, staged, clipboard, caplog):
        (workspace / "asum.toml").write_text(CONFIG_TEMPLATE.format(url=fake_server.url))
        staged.diff = ""

        assert cli_main.main([]) == 0
        assert fake_server.requests == []
        assert "No staged changes found" in caplog.text

    def test_upstream_error_exits_nonzero(self, workspace, fake_server, staged, clipboard, caplog):
        (workspace / "asum.toml").write_text(CONFIG_TEMPLATE.format(url=fake_server.url))
        fake_server.respond((500, {"error": "boom"}))

        assert cli_main.main([]) == 1
        assert "Summarization failed" in caplog.text
        assert clipboard == []

    def test_unknown_provider_exits_nonzero(self, workspace, staged, caplog):
        config = CONFIG_TEMPLATE.format(url="http://localhost:1").replace('"ollama"', '"claude"', 1)
        (workspace / "asum.toml").write_text(config)

        assert cli_main.main([]) == 1
        assert "Unknown provider" in caplog.text


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------

class TestConfigureLogging:

    def test_console_only(self):
        assert configure_logging("DEBUG") is None
        assert logging.getLogger().level == logging.DEBUG

    def test_with_file(self, tmp_path):
        log_file = configure_logging("INFO", log_dir=tmp_path / "logs")
        logging.getLogger("asum.test").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file == tmp_path / "logs" / "asum.log"
        assert "hello file" in log_file.read_text()

    def test_unknown_level_defaults_to_info(self):
        configure_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_unwritable_log_file_falls_back_to_console(self, workspace, capsys):
        log_path = workspace.parent / "home" / ".asum" / "logs" / "asum.log"
        log_path.mkdir(parents=True)

        _setup_logging(verbose=False)

        handlers = logging.getLogger().handlers
        assert handlers
        assert not any(hasattr(handler, "baseFilename") for handler in handlers)
        assert "File logging disabled" in capsys.readouterr().err
