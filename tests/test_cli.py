import os

import numpy as np
import pytest
import soundfile as sf

from application.dto.batch_dto import BatchTrimResultDTO, FileTrimResultDTO
from main import build_parser, main
from wavtrim.printer import OutputPrinter


# Helpers


def make_test_wav(path: str, samples: np.ndarray, sr: int = 16000) -> None:
    os.makedirs(os.path.dirname(path), exist_ok=True)
    sf.write(path, samples, sr, subtype="PCM_16", format="WAV")


def speech_like() -> np.ndarray:
    body: np.ndarray = np.where(np.arange(1600) % 2 == 0, 3277, -3277).astype(np.int16)
    pad: np.ndarray = np.zeros(1600, dtype=np.int16)
    return np.concatenate([pad, body, pad])


def make_batch(statuses: list, output_dir: str = "out") -> BatchTrimResultDTO:
    batch: BatchTrimResultDTO = BatchTrimResultDTO(output_dir=output_dir, total=len(statuses))
    for i, status in enumerate(statuses):
        batch.results.append(FileTrimResultDTO(f"in/{i}.wav", f"out/{i}_trimmed.wav", status))
        if status == "error":
            batch.failed_paths.append(f"in/{i}.wav")
    return batch


class TestBuildParser:
    """Tests for CLI argument parsing."""

    def test_defaults(self) -> None:
        args = build_parser().parse_args(["in", "out"])
        assert args.input_dir == "in"
        assert args.output_dir == "out"
        assert args.threshold == -50.0
        assert args.window_ms == 50.0
        assert args.jobs == 1
        assert args.skip_silent is False

    def test_short_threshold_flag(self) -> None:
        args = build_parser().parse_args(["-t", "-40", "in", "out"])
        assert args.threshold == -40.0

    def test_long_threshold_flag(self) -> None:
        args = build_parser().parse_args(["in", "out", "--threshold", "-35.5"])
        assert args.threshold == -35.5

    def test_missing_output_dir_exits(self) -> None:
        with pytest.raises(SystemExit):
            build_parser().parse_args(["in"])


class TestMain:
    """End-to-end tests for the CLI entry point."""

    @pytest.fixture
    def tree(self, tmp_path) -> str:
        root: str = os.path.join(str(tmp_path), "in")
        make_test_wav(os.path.join(root, "one.wav"), speech_like())
        make_test_wav(os.path.join(root, "nested", "two.wav"), speech_like())
        make_test_wav(os.path.join(root, "nested", "bad.wav"), speech_like(), sr=22050)
        return root

    def test_reports_processed_count(self, tree: str, tmp_path, capsys) -> None:
        out: str = os.path.join(str(tmp_path), "out")
        code: int = main([tree, out, "--no-color"])
        captured = capsys.readouterr()
        assert code == 0
        assert "Processed 2 WAV files." in captured.out
        assert os.path.isfile(os.path.join(out, "nested", "two_trimmed.wav"))

    def test_per_file_failure_does_not_abort(self, tree: str, tmp_path, caplog) -> None:
        out: str = os.path.join(str(tmp_path), "out")
        code: int = main([tree, out, "-q"])
        assert code == 0
        assert "bad.wav" in caplog.text
        assert os.path.isfile(os.path.join(out, "one_trimmed.wav"))

    def test_threshold_flag_is_applied(self, tree: str, tmp_path) -> None:
        out: str = os.path.join(str(tmp_path), "out")
        main([tree, out, "-q", "--threshold", "-10", "--skip-silent"])
        assert not os.path.exists(os.path.join(out, "one_trimmed.wav"))

    def test_trimmed_output_content(self, tree: str, tmp_path) -> None:
        out: str = os.path.join(str(tmp_path), "out")
        main([tree, out, "-q"])
        data, sr = sf.read(os.path.join(out, "one_trimmed.wav"), dtype="int16")
        assert sr == 16000
        np.testing.assert_array_equal(data, speech_like()[1600:3200])

    def test_quiet_prints_only_headline(self, tree: str, tmp_path, capsys) -> None:
        main([tree, os.path.join(str(tmp_path), "out"), "-q", "-n"])
        captured = capsys.readouterr()
        assert "Processed 2 WAV files." in captured.out
        assert "Trimmed" not in captured.out

    def test_parallel_jobs(self, tree: str, tmp_path, capsys) -> None:
        code: int = main([tree, os.path.join(str(tmp_path), "out"), "-q", "-n", "-j", "3"])
        assert code == 0
        assert "Processed 2 WAV files." in capsys.readouterr().out

    def test_missing_input_dir_returns_1(self, tmp_path, capsys) -> None:
        code: int = main(
            [os.path.join(str(tmp_path), "missing"), os.path.join(str(tmp_path), "out"), "-n"]
        )
        captured = capsys.readouterr()
        assert code == 1
        assert "Input directory does not exist" in captured.err

    def test_nan_threshold_returns_1(self, tree: str, tmp_path, capsys) -> None:
        code: int = main([tree, os.path.join(str(tmp_path), "out"), "-n", "-t", "nan"])
        assert code == 1
        assert "threshold" in capsys.readouterr().err

    def test_empty_tree_warns(self, tmp_path, capsys) -> None:
        root: str = os.path.join(str(tmp_path), "empty")
        os.makedirs(root)
        code: int = main([root, os.path.join(str(tmp_path), "out"), "-n"])
        captured = capsys.readouterr()
        assert code == 0
        assert "No WAV files found" in captured.out
        assert "Processed 0 WAV files." in captured.out


class TestOutputPrinter:
    """Tests for the CLI output formatter."""

    def test_summary_headline_and_details(self, capsys) -> None:
        printer: OutputPrinter = OutputPrinter(no_color=True)
        printer.summary(make_batch(["trimmed", "trimmed", "untrimmed", "silent", "error"]))
        out: str = capsys.readouterr().out
        assert "Processed 4 WAV files." in out
        assert "Trimmed   : 2" in out
        assert "Untrimmed : 1" in out
        assert "Silent    : 1" in out
        assert "Failed    : 1" in out
        assert "Output    : out" in out

    def test_summary_counts_skipped_as_silent(self, capsys) -> None:
        printer: OutputPrinter = OutputPrinter(no_color=True)
        printer.summary(make_batch(["skipped", "silent"]))
        assert "Silent    : 2" in capsys.readouterr().out

    def test_quiet_summary_keeps_headline(self, capsys) -> None:
        printer: OutputPrinter = OutputPrinter(quiet=True, no_color=True)
        printer.summary(make_batch(["trimmed"]))
        out: str = capsys.readouterr().out
        assert "Processed 1 WAV files." in out
        assert "Trimmed" not in out

    def test_error_prints_to_stderr(self, capsys) -> None:
        printer: OutputPrinter = OutputPrinter(no_color=True)
        printer.error("Input directory does not exist.", hint="Check the path.")
        captured = capsys.readouterr()
        assert "Input directory does not exist." in captured.err
        assert "Check the path." in captured.err
        assert captured.out == ""

    def test_quiet_does_not_suppress_error(self, capsys) -> None:
        printer: OutputPrinter = OutputPrinter(quiet=True, no_color=True)
        printer.error("Critical failure.")
        assert "Critical failure." in capsys.readouterr().err

    def test_quiet_suppresses_warning(self, capsys) -> None:
        printer: OutputPrinter = OutputPrinter(quiet=True)
        printer.warning("Some warning.", hint="Some hint.")
        assert capsys.readouterr().out == ""

    def test_no_color_disables_ansi(self, capsys) -> None:
        printer: OutputPrinter = OutputPrinter(no_color=True)
        printer.summary(make_batch(["trimmed"]))
        assert "\033[" not in capsys.readouterr().out

    def test_color_enabled_includes_ansi(self, capsys, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        printer: OutputPrinter = OutputPrinter(no_color=False)
        printer.summary(make_batch(["trimmed"]))
        assert "\033[" in capsys.readouterr().out

    def test_no_color_env_variable(self, monkeypatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        assert OutputPrinter().no_color is True

    def test_colorize_returns_ansi_when_color_enabled(self, monkeypatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        assert OutputPrinter()._colorize("hello", "32") == "\033[32mhello\033[0m"
