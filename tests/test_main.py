"""
Tests for the command line entry point.
"""

import pytest

from briefdesk import main as cli
from briefdesk.annotations.models import make_highlight
from briefdesk.session_store import SessionSnapshot


@pytest.fixture
def stored(session_store, sample_brief):
    session_store.save(SessionSnapshot(
        id="s1",
        brand_description="Sustainable sneakers",
        creative_brief=sample_brief,
        annotations=[make_highlight("Quiet confidence", "Brand Essence")],
    ))
    return session_store


@pytest.fixture
def use_store(monkeypatch):
    def install(store):
        monkeypatch.setattr(cli, "_create_store", lambda: store)
    return install


class TestArguments:
    def test_no_command_launches_gui(self):
        assert cli.parse_args([]).command is None

    def test_export_arguments(self, tmp_path):
        args = cli.parse_args(["export", "s1", "-o", str(tmp_path)])

        assert (args.command, args.session_id, args.output) == ("export", "s1", tmp_path)

    def test_summary_format_choices(self):
        with pytest.raises(SystemExit):
            cli.parse_args(["summary", "s1", "--format", "pdf"])


class TestCommands:
    def test_sessions(self, stored, use_store, capsys):
        use_store(stored)

        assert cli.main(["sessions"]) == 0
        assert "Sustainable sneakers" in capsys.readouterr().out

    def test_sessions_empty(self, session_store, use_store, capsys):
        use_store(session_store)

        assert cli.main(["sessions"]) == 0
        assert "No stored sessions." in capsys.readouterr().out

    def test_export(self, stored, use_store, tmp_path, capsys):
        use_store(stored)

        assert cli.main(["export", "s1", "-o", str(tmp_path)]) == 0

        path = tmp_path / "briefdesk-brief-sustainable-sneakers.pdf"
        assert path.read_bytes().startswith(b"%PDF")
        assert str(path) in capsys.readouterr().out

    def test_export_unknown_session(self, session_store, use_store, tmp_path, capsys):
        use_store(session_store)

        assert cli.main(["export", "missing", "-o", str(tmp_path)]) == 1
        assert "does not exist" in capsys.readouterr().err

    def test_summary_markdown(self, stored, use_store, capsys):
        use_store(stored)

        assert cli.main(["summary", "s1", "--format", "md"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("# Sustainable sneakers")
        assert "## Highlights" in out
