# tests/test_cli.py
"""Test the spot-link command line"""

import json
import logging

import click as plain_click
import pytest
from click.testing import CliRunner

from spot_linker import cli as cli_module
from spot_linker.core.cache import MatchCache
from spot_linker.youtube.matcher import YouTubeMatcher
from spot_linker.youtube.service import LinkService

from conftest import FakeSearch, make_candidate


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(f"output:\n  log_directory: '{tmp_path / 'logs'}'\n", encoding="utf-8")
    return path


@pytest.fixture
def fake_service(monkeypatch):
    """Replace the ytmusicapi-backed service with one using FakeSearch"""
    search = FakeSearch(default=[make_candidate()])
    monkeypatch.setattr(
        cli_module,
        "_build_service",
        lambda config: LinkService(YouTubeMatcher(search), MatchCache()),
    )

    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    yield search
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


class TestArguments:
    """Test option validation"""

    def test_version(self, runner):
        result = runner.invoke(cli_module.cli, ["--version"])
        assert result.exit_code == 0
        assert "spot-linker 0.1.0" in result.output

    def test_no_arguments_shows_help(self, runner):
        result = runner.invoke(cli_module.cli, [])
        assert result.exit_code == 0
        assert "--track" in result.output

    def test_track_requires_artist(self, runner):
        result = runner.invoke(cli_module.cli, ["--track", "Shape of You"])
        assert result.exit_code == 2

    def test_file_excludes_track(self, runner, tmp_path):
        track_file = tmp_path / "tracks.yaml"
        track_file.write_text("- {title: Song, artists: Artist}\n", encoding="utf-8")

        result = runner.invoke(
            cli_module.cli, ["--file", str(track_file), "--track", "Song", "--artist", "Artist"]
        )
        assert result.exit_code == 2

    def test_bad_duration(self, runner):
        result = runner.invoke(
            cli_module.cli, ["--track", "Song", "--artist", "Artist", "--duration", "soon"]
        )
        assert result.exit_code == 2


class TestHelpers:
    """Test CLI parsing helpers"""

    def test_parse_duration_option(self):
        assert cli_module._parse_duration_option("3:53") == 233_000
        assert cli_module._parse_duration_option("233713") == 233_713
        assert cli_module._parse_duration_option(None) is None

    def test_parse_duration_option_rejects_zero(self):
        for value in ("0", "0:00"):
            with pytest.raises(plain_click.BadParameter):
                cli_module._parse_duration_option(value)

    def test_read_yaml_track_file(self, tmp_path):
        path = tmp_path / "tracks.yaml"
        path.write_text(
            "tracks:\n"
            "  - title: Shape of You\n"
            "    artists: Ed Sheeran\n"
            "    duration_ms: 233713\n"
            "  - name: Stay\n"
            "    artist: [The Kid LAROI, Justin Bieber]\n",
            encoding="utf-8",
        )

        tracks = cli_module._read_track_file(path)

        assert [t.title for t in tracks] == ["Shape of You", "Stay"]
        assert tracks[1].artists == "The Kid LAROI, Justin Bieber"

    def test_read_json_track_file(self, tmp_path):
        path = tmp_path / "tracks.json"
        path.write_text(json.dumps([{"title": "Perfect", "artists": "Ed Sheeran"}]), encoding="utf-8")

        tracks = cli_module._read_track_file(path)

        assert tracks[0].artists == "Ed Sheeran"

    def test_read_track_file_rejects_bad_shapes(self, tmp_path):
        path = tmp_path / "tracks.yaml"
        for content in ("{}\n", "- just a string\n", "- {title: Song, artists: A, duration_ms: long}\n"):
            path.write_text(content, encoding="utf-8")
            with pytest.raises(plain_click.BadParameter):
                cli_module._read_track_file(path)


class TestRun:
    """Test complete runs against a fake search backend"""

    def test_json_output(self, runner, config_file, fake_service):
        result = runner.invoke(cli_module.cli, [
            "--track", "Shape of You", "--artist", "Ed Sheeran", "--duration", "3:54",
            "--config", str(config_file), "--json",
        ])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["searched"] == 1
        assert data["results"][0]["confidence"] == "HIGH"
        assert data["results"][0]["track"]["duration_ms"] == 234_000

    def test_missing_config_file(self, runner, tmp_path, fake_service):
        result = runner.invoke(cli_module.cli, [
            "--track", "Song", "--artist", "Artist",
            "--config", str(tmp_path / "nope.yaml"),
        ])

        assert result.exit_code == 1
        assert "Configuration error" in result.output

    def test_zero_duration_is_a_usage_error(self, runner, config_file, fake_service):
        result = runner.invoke(cli_module.cli, [
            "--track", "Shape of You", "--artist", "Ed Sheeran", "--duration", "0:00",
            "--config", str(config_file),
        ])

        assert result.exit_code == 2
        assert fake_service.queries == []

    def test_table_output_keeps_bracketed_titles(self, runner, config_file, fake_service, tmp_path):
        """Test video and track titles with square brackets print literally"""
        fake_service.responses = {
            "Shape of You": [make_candidate(title="Ed Sheeran - Shape of You [lyrics]", video_id="lyr")],
            "Back in Black": [
                make_candidate(title="AC/DC - Back in Black [/radio edit]", video_id="bib", channel_name="AC/DC"),
            ],
        }
        track_file = tmp_path / "tracks.yaml"
        track_file.write_text(
            "- {title: Shape of You, artists: Ed Sheeran}\n"
            "- {title: Back in Black, artists: AC/DC}\n",
            encoding="utf-8",
        )

        result = runner.invoke(
            cli_module.cli,
            ["--file", str(track_file), "--config", str(config_file)],
            env={"COLUMNS": "200"},
        )

        assert result.exit_code == 0, result.output
        assert result.exception is None
        assert "Shape of You [lyrics]" in result.output
        assert "Back in Black [/radio edit]" in result.output
        assert "2 searched" in result.output
