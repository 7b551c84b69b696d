"""Tests for deckview.__main__ — CLI argument parsing and orchestration."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest

from deckview.__main__ import main
from deckview.loader import encode_deck

from conftest import MINIMAL_DECK


def _run_main(argv):
    with patch("sys.argv", ["deckview", *argv]):
        main()


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------

class TestArgParsing:
    def test_input_required(self):
        with pytest.raises(SystemExit):
            _run_main([])

    def test_missing_input_file_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit) as exc:
            _run_main([str(tmp_path / "nonexistent.md")])
        assert exc.value.code == 1
        assert "not found" in capsys.readouterr().err

    def test_encode_and_inspect_exclusive(self, tmp_deck):
        with pytest.raises(SystemExit):
            _run_main([str(tmp_deck), "--encode", "--inspect"])


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

class TestRender:
    def test_default_output_derives_from_input(self, tmp_deck):
        _run_main([str(tmp_deck)])
        output = tmp_deck.with_suffix(".html")
        assert output.exists()
        page = output.read_text(encoding="utf-8")
        assert page.count('<section class="slide"') == 2
        assert "<title>deck</title>" in page

    def test_explicit_output_and_title(self, tmp_deck, tmp_path):
        out = tmp_path / "out" / "talk.html"
        out.parent.mkdir()
        _run_main([str(tmp_deck), "--output", str(out), "--title", "My Talk"])
        assert "<title>My Talk</title>" in out.read_text(encoding="utf-8")

    def test_single_slide(self, tmp_global_deck, tmp_path):
        out = tmp_path / "one.html"
        _run_main([str(tmp_global_deck), "-o", str(out), "--slide", "2"])
        page = out.read_text(encoding="utf-8")
        assert page.count('<section class="slide"') == 1
        assert "centered" in page

    def test_slide_clamped(self, tmp_global_deck, tmp_path, capsys):
        out = tmp_path / "one.html"
        _run_main([str(tmp_global_deck), "-o", str(out), "--slide", "9"])
        assert 'id="slide-2"' in out.read_text(encoding="utf-8")
        assert "out of range" in capsys.readouterr().out

    def test_base64_source(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        _run_main([encode_deck(MINIMAL_DECK)])
        assert (tmp_path / "deck.html").exists()

    def test_no_slides_exits(self, tmp_path, capsys):
        md = tmp_path / "empty.md"
        md.write_text("---\n\n---\n", encoding="utf-8")
        with pytest.raises(SystemExit) as exc:
            _run_main([str(md)])
        assert exc.value.code == 1
        assert "No slides found" in capsys.readouterr().err
        assert not md.with_suffix(".html").exists()

    def test_load_error_exits(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            _run_main(["base64:not*valid"])
        assert "Error:" in capsys.readouterr().err

    def test_log_file_written(self, tmp_deck, tmp_path):
        log = tmp_path / "deckview.log"
        _run_main([str(tmp_deck), "--log-file", str(log)])
        assert "Loaded deck" in log.read_text(encoding="utf-8")

    def test_log_handlers_released(self, tmp_deck, tmp_path):
        log = tmp_path / "deckview.log"
        _run_main([str(tmp_deck), "--log-file", str(log), "--verbose"])
        _run_main([str(tmp_deck), "--log-file", str(log), "--verbose"])
        assert logging.getLogger("deckview").handlers == []


# ---------------------------------------------------------------------------
# Other modes
# ---------------------------------------------------------------------------

class TestModes:
    def test_encode(self, tmp_deck, capsys):
        _run_main([str(tmp_deck), "--encode"])
        out = capsys.readouterr().out.strip().splitlines()
        assert out[0] == encode_deck(MINIMAL_DECK)
        assert not tmp_deck.with_suffix(".html").exists()

    def test_encode_with_base_url(self, tmp_deck, capsys):
        _run_main([str(tmp_deck), "--encode", "--base-url", "https://view.example.com/", "--slide", "2"])
        out = capsys.readouterr().out.strip().splitlines()
        assert out[1].startswith("https://view.example.com/?deck=")
        assert out[1].endswith("slide=2")

    def test_inspect(self, tmp_global_deck, capsys):
        _run_main([str(tmp_global_deck), "--inspect"])
        report = json.loads(capsys.readouterr().out)
        assert report["global"] == {"transition": "fade", "size": "large"}
        second = report["slides"][1]
        assert second["options"]["bg"] == "#222"
        assert "centered" in second["classes"]
        assert second["image_class"] == "img-center"
