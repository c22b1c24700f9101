"""Tests for CLI."""

import json
import os
import tempfile
import pytest

from pipy_transcript import cli
from pipy_transcript.cli import create_parser, main
from pipy_transcript.storage import JsonlTranscriptStore
from pipy_transcript.types import Message, TextContent, TokenUsage


@pytest.fixture
def temp_dir(monkeypatch):
    """Temporary directory used as home and working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        monkeypatch.setenv("HOME", tmpdir)
        monkeypatch.chdir(tmpdir)
        yield tmpdir


@pytest.fixture
def store(temp_dir):
    store = JsonlTranscriptStore(os.path.join(temp_dir, "transcripts"))
    store.save_transcript("conv-1", [
        Message(role="user", content=[TextContent(text="u1")], id="u1"),
        Message(role="assistant", content=[TextContent(text="a1")], id="a1",
                token_usage=TokenUsage(total_tokens=1500)),
        Message(role="user", content=[TextContent(text="u2")], id="u2"),
        Message(role="assistant", content=[TextContent(text="a2")], id="a2",
                token_usage=TokenUsage(total_tokens=1000)),
    ])
    return store


class TestCreateParser:
    def test_truncate_defaults(self):
        """Test that unset truncate options fall through to settings."""
        args = create_parser().parse_args(["truncate", "conv-1"])

        assert args.command == "truncate"
        assert args.transcript_id == "conv-1"
        assert args.max_tokens is None
        assert args.summary_length is None
        assert args.request_source is None
        assert args.json is False

    def test_truncate_flags(self):
        args = create_parser().parse_args([
            "--root", "/data", "truncate", "conv-1",
            "--max-tokens", "2000", "--summary-length", "short",
            "--request-source", "user", "-m", "openai/gpt-4o",
        ])

        assert args.root == "/data"
        assert args.max_tokens == 2000
        assert args.summary_length == "short"
        assert args.request_source == "user"
        assert args.model == "openai/gpt-4o"

    def test_invalid_choice(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["truncate", "conv-1", "--summary-length", "huge"])


class TestMain:
    def test_no_command(self, temp_dir, capsys):
        assert main([]) == 1
        assert "usage" in capsys.readouterr().out

    def test_list(self, store, capsys):
        assert main(["--root", str(store.root), "list"]) == 0

        out = capsys.readouterr().out
        assert "conv-1" in out
        assert "1 transcripts found" in out

    def test_tokens(self, store, capsys):
        assert main(["--root", str(store.root), "tokens", "conv-1"]) == 0

        out = capsys.readouterr().out
        assert "Messages: 4" in out
        assert "Tokens: 2,500" in out

    def test_tokens_missing(self, store, capsys):
        assert main(["--root", str(store.root), "tokens", "nope"]) == 1
        assert "Transcript not found" in capsys.readouterr().err

    def test_tokens_corrupt_transcript(self, store, capsys):
        """Test that a malformed messages file is reported, not raised."""
        with open(store.messages_path("conv-1"), "w") as f:
            f.write("{not json}\n")

        assert main(["--root", str(store.root), "tokens", "conv-1"]) == 1
        assert "invalid message" in capsys.readouterr().err

    def test_storage_root_from_settings(self, store, capsys):
        """Test that the project settings file supplies the storage root."""
        settings_dir = os.path.join(os.getcwd(), ".pi")
        os.makedirs(settings_dir)
        with open(os.path.join(settings_dir, "transcript-settings.json"), "w") as f:
            json.dump({"storage": {"root": str(store.root)}}, f)

        assert main(["list"]) == 0
        assert "conv-1" in capsys.readouterr().out


class TestTruncateCommand:
    @pytest.fixture
    def summarizer(self, monkeypatch, make_summarizer):
        stub = make_summarizer()
        created = {}

        def factory(**kwargs):
            created.update(kwargs)
            return stub

        monkeypatch.setattr(cli, "LiteLLMSummarizer", factory)
        stub.created = created
        return stub

    def test_truncate(self, store, summarizer, capsys):
        code = main(["--root", str(store.root), "truncate", "conv-1", "--max-tokens", "1000"])

        assert code == 0
        out = capsys.readouterr().out
        assert "Original Token Count: 2500" in out
        assert "New Token Count: 1000" in out
        assert "Reduced token count from 2500 to 1000." in out
        assert [m.id for m in store.load_transcript("conv-1")][2:] == ["u2", "a2"]
        assert summarizer.created["model"] == "anthropic/claude-sonnet-4-5"

    def test_truncate_json(self, store, summarizer, capsys):
        code = main([
            "--root", str(store.root), "truncate", "conv-1",
            "--max-tokens", "1000", "--summary-length", "short", "--json",
        ])

        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert report["summary_length"] == "short"
        assert report["max_tokens_to_keep"] == 1000

    def test_model_flag(self, store, summarizer):
        main(["--root", str(store.root), "truncate", "conv-1", "-m", "openai/gpt-4o"])

        assert summarizer.created["model"] == "openai/gpt-4o"

    def test_invalid_max_tokens(self, store, summarizer, capsys):
        """Test that an out-of-range budget is reported without touching the transcript."""
        code = main(["--root", str(store.root), "truncate", "conv-1", "--max-tokens", "500"])

        assert code == 1
        assert "[validate-params]" in capsys.readouterr().err
        assert summarizer.requests == []
        assert not os.path.exists(os.path.join(store.transcript_dir("conv-1"), "backups"))

    def test_corrupt_transcript(self, store, summarizer, capsys):
        with open(store.messages_path("conv-1"), "w") as f:
            f.write("{not json}\n")

        assert main(["--root", str(store.root), "truncate", "conv-1"]) == 1
        assert "invalid message" in capsys.readouterr().err
        assert summarizer.requests == []

    def test_missing_transcript(self, store, summarizer, capsys):
        assert main(["--root", str(store.root), "truncate", "nope"]) == 1
        assert "Transcript not found" in capsys.readouterr().err
