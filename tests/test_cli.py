"""
End-to-end tests for the pxe command line.
"""

import json
import logging

import numpy as np
import pytest

import pxe
from logging_utils import resolve_log_level
from pixel_engine import combine, get_operation
from pixel_engine.adapter import from_array, load_image, save_image


@pytest.fixture
def image_file(tmp_path):
    rng = np.random.default_rng(3)
    buffer = from_array(rng.integers(0, 256, (10, 12, 3), dtype=np.uint8))
    return save_image(buffer, tmp_path / "input.png")


class TestList:

    def test_lists_operations(self, capsys):
        assert pxe.main(["list"]) == 0
        out = capsys.readouterr().out
        assert "sobel" in out
        assert "xor" in out

    def test_no_command_prints_help(self, capsys):
        assert pxe.main([]) == 1
        assert "usage" in capsys.readouterr().out


class TestApply:

    def test_apply_single_file(self, image_file, tmp_path):
        output = tmp_path / "out.png"
        assert pxe.main(["apply", "sobel", str(image_file), str(output)]) == 0
        expected = get_operation("sobel")(load_image(image_file))
        assert load_image(output) == expected

    def test_apply_median_window_option(self, image_file, tmp_path):
        output = tmp_path / "out.png"
        assert pxe.main(["apply", "median", str(image_file), str(output), "--window", "5"]) == 0
        expected = get_operation("median-5")(load_image(image_file))
        assert load_image(output) == expected

    def test_apply_directory(self, image_file, tmp_path):
        out_dir = tmp_path / "out"
        assert pxe.main(["apply", "grayscale", str(image_file.parent), str(out_dir)]) == 0
        assert (out_dir / "input.png").is_file()

    def test_unknown_operation_fails(self, image_file, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            code = pxe.main(["apply", "blur", str(image_file), str(tmp_path / "o.png")])
        assert code == 1
        assert "Unknown operation" in caplog.text

    def test_unwritable_output_fails(self, image_file, tmp_path, caplog):
        with caplog.at_level(logging.ERROR):
            code = pxe.main(["apply", "sobel", str(image_file), str(tmp_path / "out")])
        assert code == 1
        assert "Could not write image" in caplog.text

    def test_directory_batch_continues_after_write_error(self, image_file, tmp_path, caplog):
        second = save_image(load_image(image_file), tmp_path / "second.png")
        out_dir = tmp_path / "out"
        out_dir.mkdir()
        # a directory in place of the first target makes that write fail
        (out_dir / image_file.name).mkdir()
        with caplog.at_level(logging.ERROR):
            code = pxe.main(["apply", "grayscale", str(tmp_path), str(out_dir)])
        assert code == 1
        assert (out_dir / second.name).is_file()

    def test_missing_source_fails(self, tmp_path):
        code = pxe.main(["apply", "sobel", str(tmp_path / "none.png"), str(tmp_path / "o.png")])
        assert code == 1


class TestCombine:

    def test_combine_xor(self, image_file, tmp_path):
        output = tmp_path / "xor.png"
        assert pxe.main(["combine", "xor", str(image_file), str(image_file), str(output)]) == 0
        assert not load_image(output).data.any()

    def test_combine_and(self, image_file, tmp_path):
        output = tmp_path / "and.png"
        assert pxe.main(["combine", "and", str(image_file), str(image_file), str(output)]) == 0
        source = load_image(image_file)
        assert load_image(output) == combine(source, source, "and")

    def test_size_mismatch_fails(self, image_file, tmp_path, caplog):
        other = save_image(from_array(np.zeros((4, 4, 3), dtype=np.uint8)), tmp_path / "s.png")
        with caplog.at_level(logging.ERROR):
            code = pxe.main(["combine", "or", str(image_file), str(other), str(tmp_path / "o.png")])
        assert code == 1
        assert "Cannot combine" in caplog.text


class TestHistogram:

    def test_json_report(self, image_file, capsys):
        assert pxe.main(["histogram", str(image_file), "--json"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert sum(report["counts"]) == 10 * 12
        assert len(report["equalization_map"]) == 256
        assert max(report["equalization_map"]) <= 7
        assert len(report["equalized_histogram"]) == 8

    def test_levels_option(self, image_file, capsys):
        assert pxe.main(["histogram", str(image_file), "--json", "--levels", "4"]) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["levels"] == 4
        assert max(report["equalization_map"]) <= 3

    def test_table_output(self, image_file, capsys):
        assert pxe.main(["histogram", str(image_file)]) == 0
        out = capsys.readouterr().out
        assert "intensity" in out
        assert "equalized (8 levels)" in out


class TestPipeline:

    def test_pipeline_with_artifacts(self, image_file, tmp_path, capsys):
        output = tmp_path / "final.png"
        artifacts = tmp_path / "steps"
        code = pxe.main([
            "pipeline", str(image_file), str(output),
            "grayscale", "median-3", "laplacian",
            "--artifacts", str(artifacts), "--json",
        ])
        assert code == 0
        report = json.loads(capsys.readouterr().out)
        assert [s["name"] for s in report["steps"]] == [
            "grayscale", "median(3)", "kernel(laplacian)",
        ]
        assert output.is_file()
        assert len(list(artifacts.glob("*.png"))) == 3

    def test_unknown_step_fails(self, image_file, tmp_path):
        code = pxe.main(["pipeline", str(image_file), str(tmp_path / "o.png"), "swirl"])
        assert code == 1


class TestLogLevel:

    def test_explicit_level_wins(self, monkeypatch):
        monkeypatch.setenv("PXE_LOG_LEVEL", "error")
        assert resolve_log_level("debug") == logging.DEBUG

    def test_verbose_flags(self):
        assert resolve_log_level(verbose=1) == logging.DEBUG
        assert resolve_log_level(quiet=1) == logging.WARNING
        assert resolve_log_level(quiet=2) == logging.ERROR

    def test_environment_default(self, monkeypatch):
        monkeypatch.setenv("PXE_LOG_LEVEL", "warning")
        assert resolve_log_level() == logging.WARNING

    def test_default_is_info(self, monkeypatch):
        monkeypatch.delenv("PXE_LOG_LEVEL", raising=False)
        assert resolve_log_level() == logging.INFO
