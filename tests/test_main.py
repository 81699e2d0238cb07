"""
Command Line Tests
==================

Argument parsing, preconditions and command wiring. ffmpeg and the
playback window are replaced with test doubles.
"""

import pytest

from conftest import RecordingRenderer, write_test_image
from tronglerize import main as cli
from tronglerize.config import Settings
from tronglerize.errors import OutputDirectoryNotEmpty
from tronglerize.playback import FrameCountCadence, WallClockCadence


@pytest.fixture(autouse=True)
def quiet_settings(monkeypatch):
    """Run every command with default settings and no real window."""
    monkeypatch.setattr(cli.config, "settings", Settings())
    monkeypatch.setattr(cli, "setup_logging", lambda settings: None)
    monkeypatch.setattr(cli, "OpenCVRenderer", lambda **kwargs: RecordingRenderer(stop_after=2))


class TestEnsureEmptyOutputDir:
    """Tests for the output directory precondition."""

    def test_creates_missing(self, tmp_path):
        target = tmp_path / "new" / "out"
        cli.ensure_empty_output_dir(target)
        assert target.is_dir()

    def test_accepts_empty(self, tmp_path):
        cli.ensure_empty_output_dir(tmp_path)

    def test_rejects_non_empty(self, tmp_path):
        (tmp_path / "frame1.bin").write_bytes(b"x")
        with pytest.raises(OutputDirectoryNotEmpty):
            cli.ensure_empty_output_dir(tmp_path)

    def test_rejects_file(self, tmp_path):
        target = tmp_path / "file"
        target.write_text("x")
        with pytest.raises(NotADirectoryError):
            cli.ensure_empty_output_dir(target)


class TestBuildCadence:
    """Tests for cadence selection."""

    def test_default_is_wall_clock_at_source_rate(self):
        cadence = cli.build_cadence(Settings(), source_fps=25.0)
        assert isinstance(cadence, WallClockCadence)
        assert cadence.scene_duration == pytest.approx(0.04)

    def test_falls_back_to_default_fps(self):
        cadence = cli.build_cadence(Settings())
        assert cadence.scene_duration == pytest.approx(1 / 24)

    def test_configured_fps_beats_source(self):
        settings = Settings.model_validate({"playback": {"fps": 10}})
        cadence = cli.build_cadence(settings, source_fps=25.0)
        assert cadence.scene_duration == pytest.approx(0.1)

    def test_frame_count_from_settings(self):
        settings = Settings.model_validate({"playback": {"cadence": "frame_count", "frames_per_scene": 3}})
        cadence = cli.build_cadence(settings)
        assert isinstance(cadence, FrameCountCadence)
        assert cadence.frames_per_scene == 3

    def test_explicit_arguments_win(self):
        cadence = cli.build_cadence(Settings(), cadence="frame_count", frames_per_scene=5)
        assert isinstance(cadence, FrameCountCadence)
        assert cadence.frames_per_scene == 5


class TestProcessCommand:
    """Tests for `tronglerize process`."""

    def test_success(self, frames_dir, tmp_path):
        output = tmp_path / "artifacts"
        status = cli.main(["process", str(frames_dir), str(output), "--concurrency", "2"])

        assert status == 0
        assert len(list(output.glob("*.bin"))) == 5

    def test_frame_failure_exit_code(self, frames_dir, tmp_path):
        (frames_dir / "frame000003.jpg").write_bytes(b"corrupt")
        output = tmp_path / "artifacts"

        status = cli.main(["process", str(frames_dir), str(output)])

        assert status == 1
        assert sorted(p.name for p in output.iterdir()) == [
            "frame000001.bin", "frame000002.bin", "frame000004.bin", "frame000005.bin",
        ]

    def test_non_empty_output(self, frames_dir, tmp_path):
        output = tmp_path / "artifacts"
        output.mkdir()
        (output / "old.bin").write_bytes(b"x")

        assert cli.main(["process", str(frames_dir), str(output)]) == 1

    def test_invalid_concurrency(self, frames_dir, tmp_path):
        with pytest.raises(SystemExit):
            cli.main(["process", str(frames_dir), str(tmp_path / "out"), "--concurrency", "0"])


class TestPlayCommand:
    """Tests for `tronglerize play`."""

    def test_plays_artifacts(self, frames_dir, tmp_path):
        output = tmp_path / "artifacts"
        assert cli.main(["process", str(frames_dir), str(output)]) == 0

        assert cli.main(["play", str(output), "--cadence", "frame_count"]) == 0

    def test_empty_directory(self, tmp_path):
        assert cli.main(["play", str(tmp_path)]) == 1

    def test_missing_directory(self, tmp_path):
        assert cli.main(["play", str(tmp_path / "missing")]) == 1


class TestConvertCommand:
    """Tests for `tronglerize convert` with ffmpeg stubbed out."""

    def test_full_flow(self, tmp_path, monkeypatch):
        video = tmp_path / "clip.mp4"
        video.write_bytes(b"video")
        cache_root = tmp_path / "cache"
        output = tmp_path / "artifacts"

        monkeypatch.setattr(
            cli.config,
            "settings",
            Settings.model_validate({"extraction": {"cache_root": str(cache_root)}}),
        )
        monkeypatch.setattr(cli, "probe_frame_rate", lambda video, **kwargs: 12.0)

        def fake_extract(video, cache_dir, frame_rate, **kwargs):
            for i in range(1, 4):
                write_test_image(cache_dir / f"frame{i:06d}.jpg", width=24, height=24)
            return 3

        played = []
        monkeypatch.setattr(cli, "extract_frames", fake_extract)
        monkeypatch.setattr(
            cli, "play_artifacts", lambda directory, settings, cadence: played.append(cadence)
        )

        status = cli.main(["convert", str(video), str(output)])

        assert status == 0
        assert len(list(output.glob("*.bin"))) == 3
        assert len(played) == 1
        assert played[0].scene_duration == pytest.approx(1 / 12)

    def test_no_play(self, tmp_path, monkeypatch):
        video = tmp_path / "clip.mp4"
        video.write_bytes(b"video")
        monkeypatch.setattr(
            cli.config,
            "settings",
            Settings.model_validate({"extraction": {"cache_root": str(tmp_path / "cache")}}),
        )
        monkeypatch.setattr(cli, "probe_frame_rate", lambda video, **kwargs: 24.0)
        monkeypatch.setattr(
            cli,
            "extract_frames",
            lambda video, cache_dir, rate, **kwargs: write_test_image(cache_dir / "frame000001.jpg"),
        )

        def fail_play(*args):
            raise AssertionError("should not play")

        monkeypatch.setattr(cli, "play_artifacts", fail_play)

        assert cli.main(["convert", str(video), str(tmp_path / "out"), "--no-play"]) == 0

    def test_output_checked_before_extraction(self, tmp_path, monkeypatch):
        output = tmp_path / "artifacts"
        output.mkdir()
        (output / "old.bin").write_bytes(b"x")

        def fail(*args, **kwargs):
            raise AssertionError("should not run")

        monkeypatch.setattr(cli, "prepare_cache_dir", fail)

        assert cli.main(["convert", str(tmp_path / "clip.mp4"), str(output)]) == 1


class TestConfigOption:
    """Tests for the global --config option."""

    def test_explicit_config_file(self, frames_dir, tmp_path):
        config_path = tmp_path / "custom.yaml"
        config_path.write_text("pipeline:\n  concurrency_limit: 3\n  artifact_suffix: .tri\n")
        output = tmp_path / "artifacts"

        status = cli.main(["--config", str(config_path), "process", str(frames_dir), str(output)])

        assert status == 0
        assert cli.config.settings.pipeline.concurrency_limit == 3
        assert len(list(output.glob("*.tri"))) == 5

    def test_malformed_yaml_exit_code(self, frames_dir, tmp_path):
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("pipeline: [unclosed\n")

        status = cli.main(["--config", str(config_path), "process", str(frames_dir), str(tmp_path / "out")])

        assert status == 1
        assert not (tmp_path / "out").exists()

    def test_invalid_value_exit_code(self, tmp_path):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("pipeline:\n  concurrency_limit: 0\n")

        assert cli.main(["--config", str(config_path), "play", str(tmp_path)]) == 1

    def test_missing_config_exit_code(self, tmp_path):
        assert cli.main(["--config", str(tmp_path / "missing.yaml"), "play", str(tmp_path)]) == 1
