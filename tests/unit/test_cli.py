"""Unit tests for the command-line interface."""

import json
from pathlib import Path
from unittest.mock import patch

import pytest
import typer
from typer.testing import CliRunner

import epl2label
from epl2label import __version__
from epl2label.cli.app import app, build_settings, deliver, file_target, parse_product
from epl2label.config import Orientation, Polarity
from epl2label.exceptions import SendError, SendErrorKind
from epl2label.io import FileSink
from epl2label.utils import JobStats

runner = CliRunner()

PRODUCTS = [
    "--product",
    "عصير برتقال|5.00|622300123456",
    "--product",
    "مياه معدنية|3.50|622300654321",
]


class TestParseProduct:
    """Tests for parse_product."""

    def test_three_fields(self) -> None:
        product = parse_product(" Tea | 12.00 | 4006381333931 ")
        assert (product.name, product.price, product.barcode) == ("Tea", "12.00", "4006381333931")

    @pytest.mark.parametrize("value", ["Tea|12.00", "Tea|12.00|1|extra", "Tea"])
    def test_wrong_field_count(self, value: str) -> None:
        with pytest.raises(typer.BadParameter):
            parse_product(value)


class TestBuildSettings:
    """Tests for build_settings."""

    def test_defaults_kept(self) -> None:
        settings = build_settings()
        assert settings.printer.darkness == 8
        assert settings.render.coverage_threshold == 0.65
        assert settings.printer.polarity is Polarity.INVERTED

    def test_overrides(self) -> None:
        settings = build_settings(
            darkness=12,
            speed=4,
            bold_passes=1,
            threshold=0.5,
            polarity=Polarity.NORMAL,
            orientation=Orientation.LANDSCAPE,
            firmware_checksum=True,
        )
        assert (settings.printer.darkness, settings.printer.speed) == (12, 4)
        assert settings.render.bold_passes == 1
        assert settings.render.coverage_threshold == 0.5
        assert settings.printer.polarity is Polarity.NORMAL
        assert settings.printer.orientation is Orientation.LANDSCAPE
        assert settings.printer.firmware_checksum


class TestDeliver:
    """Tests for deliver."""

    def test_output_file(self, tmp_path: Path) -> None:
        output = tmp_path / "job.epl"
        assert deliver(b"P1\r\n", "Zebra", output=output) == str(output)
        assert output.read_bytes() == b"P1\r\n"

    def test_device(self, tmp_path: Path) -> None:
        device = tmp_path / "lp0"
        device.touch()
        assert deliver(b"P1\r\n", "Zebra", device=device) == str(device)
        assert device.read_bytes() == b"P1\r\n"

    def test_missing_device_falls_back(self, tmp_path: Path) -> None:
        """Test an unreachable device writes the job to the fallback directory."""
        device = tmp_path / "lp9"
        fallback = tmp_path / "out"
        fallback.mkdir()
        stats = JobStats()

        destination = deliver(b"P1\r\n", "Zebra", device=device, fallback_dir=fallback, stats=stats)

        expected = FileSink(fallback).path_for(str(device))
        assert destination == str(expected)
        assert expected.read_bytes() == b"P1\r\n"
        assert stats.fallbacks == 1

    def test_missing_device_without_fallback(self, tmp_path: Path) -> None:
        with pytest.raises(SendError) as exc_info:
            deliver(b"P1\r\n", "Zebra", device=tmp_path / "lp9")
        assert exc_info.value.kind is SendErrorKind.NOT_FOUND

    def test_access_denied_does_not_fall_back(self, tmp_path: Path) -> None:
        """Test a printer that refuses the job is not silently replaced."""

        class RefusingSink:
            def send(self, target: str, data: bytes) -> None:
                raise SendError(SendErrorKind.ACCESS_DENIED, target, "denied")

        with patch("epl2label.cli.app.default_sink", return_value=RefusingSink()):
            with pytest.raises(SendError):
                deliver(b"P1\r\n", "Zebra", fallback_dir=tmp_path)

    def test_default_file_sink(self, tmp_path: Path) -> None:
        with patch("epl2label.cli.app.default_sink", return_value=FileSink(tmp_path)):
            destination = deliver(b"P1\r\n", "Zebra LP2824")
        assert destination == str(tmp_path / "Zebra_LP2824_epl_output.bin")

    def test_file_suffix_names_default_file(self, tmp_path: Path) -> None:
        with patch("epl2label.cli.app.default_sink", return_value=FileSink(tmp_path)):
            first = deliver(b"P1\r\n", "", file_suffix="000")
            second = deliver(b"P2\r\n", "", file_suffix="001")
        assert first == str(tmp_path / "label_000_epl_output.bin")
        assert second == str(tmp_path / "label_001_epl_output.bin")
        assert Path(first).read_bytes() == b"P1\r\n"

    def test_file_suffix_names_fallback_file(self, tmp_path: Path) -> None:
        destination = deliver(b"P1\r\n", "Zebra", device=tmp_path / "lp9", fallback_dir=tmp_path, file_suffix="007")
        assert destination == str(FileSink(tmp_path).path_for(f"{tmp_path / 'lp9'}_007"))


class TestFileTarget:
    """Tests for file_target."""

    def test_no_suffix(self) -> None:
        assert file_target("Zebra", None) == "Zebra"

    def test_suffix(self) -> None:
        assert file_target("Zebra", "003") == "Zebra_003"

    def test_default_printer(self) -> None:
        assert file_target("", "003") == "label_003"


class TestVersion:
    """Tests for --version."""

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_package_example_command_exists(self) -> None:
        """Test the usage example in the package docstring names a real command."""
        example = next(line for line in epl2label.__doc__.splitlines() if "$ epl2label" in line)
        command = example.split()[2]
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0, result.output


class TestComposeCommand:
    """Tests for the compose command."""

    def test_writes_output(self, font_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "label.epl"
        result = runner.invoke(app, ["compose", "--font", str(font_file), *PRODUCTS, "--output", str(output), "-q"])
        assert result.exit_code == 0, result.output
        data = output.read_bytes()
        assert data.startswith(b"N\r\nq440\r\nQ320,24\r\n")
        assert data.endswith(b"P1\r\n")

    def test_dry_run_sends_nothing(self, font_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "label.epl"
        result = runner.invoke(app, ["compose", "--font", str(font_file), *PRODUCTS, "--output", str(output), "--dry-run"])
        assert result.exit_code == 0, result.output
        assert not output.exists()
        assert "GW" in result.output

    def test_preview(self, font_file: Path, tmp_path: Path) -> None:
        preview = tmp_path / "label.png"
        result = runner.invoke(
            app, ["compose", "--font", str(font_file), *PRODUCTS, "--dry-run", "--preview", str(preview), "-q"]
        )
        assert result.exit_code == 0, result.output
        assert preview.read_bytes().startswith(b"\x89PNG")

    def test_profile_options(self, font_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "label.epl"
        result = runner.invoke(
            app,
            [
                "compose",
                "--font",
                str(font_file),
                *PRODUCTS,
                "--output",
                str(output),
                "--darkness",
                "12",
                "--speed",
                "3",
                "--firmware-checksum",
                "-q",
            ],
        )
        assert result.exit_code == 0, result.output
        data = output.read_bytes()
        assert b"\r\nD12\r\nS3\r\n" in data
        assert b',"622300123456"\r\n' in data

    def test_three_products_rejected(self, font_file: Path, tmp_path: Path) -> None:
        output = tmp_path / "label.epl"
        result = runner.invoke(
            app,
            ["compose", "--font", str(font_file), *PRODUCTS, "--product", "Tea|1|1", "--output", str(output)],
        )
        assert result.exit_code == 1
        assert not output.exists()

    def test_malformed_product(self, font_file: Path) -> None:
        result = runner.invoke(app, ["compose", "--font", str(font_file), "--product", "Tea|1", "--product", "x|1|1"])
        assert result.exit_code == 1

    def test_missing_font(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["compose", "--font", str(tmp_path / "missing.ttf"), *PRODUCTS])
        assert result.exit_code == 1

    def test_fallback_directory(self, font_file: Path, tmp_path: Path) -> None:
        fallback = tmp_path / "fallback"
        fallback.mkdir()
        device = tmp_path / "lp9"
        result = runner.invoke(
            app,
            ["compose", "--font", str(font_file), *PRODUCTS, "--device", str(device), "--fallback-dir", str(fallback)],
        )
        assert result.exit_code == 0, result.output
        assert FileSink(fallback).path_for(str(device)).exists()

    def test_log_file(self, font_file: Path, tmp_path: Path) -> None:
        log_file = tmp_path / "epl2label.log"
        result = runner.invoke(
            app,
            [
                "compose",
                "--font",
                str(font_file),
                *PRODUCTS,
                "--output",
                str(tmp_path / "label.epl"),
                "--log-file",
                str(log_file),
                "-q",
            ],
        )
        assert result.exit_code == 0, result.output
        assert log_file.exists()


class TestBatchCommand:
    """Tests for the batch command."""

    def write_batch(self, path: Path, entries: list[dict]) -> Path:
        path.write_text(json.dumps(entries, ensure_ascii=False), encoding="utf-8")
        return path

    def test_writes_every_label(self, font_file: Path, tmp_path: Path) -> None:
        out = tmp_path / "out"
        out.mkdir()
        batch_file = self.write_batch(
            tmp_path / "batch.json",
            [
                {
                    "products": [
                        {"name": "عصير", "price": "5.00", "barcode": "622300123456"},
                        {"name": "مياه", "price": "3.50", "barcode": "622300654321"},
                    ]
                },
                {
                    "title": "أسواق ابوعمر",
                    "products": [
                        {"name": f"صنف {i}", "price": f"{i}.00", "barcode": f"62230012345{i}"} for i in range(4)
                    ],
                },
            ],
        )

        result = runner.invoke(app, ["batch", str(batch_file), "--font", str(font_file), "--output-dir", str(out)])

        assert result.exit_code == 0, result.output
        assert (out / "label_000_epl_output.bin").exists()
        assert (out / "label_001_epl_output.bin").exists()

    def test_bad_entry_reported(self, font_file: Path, tmp_path: Path) -> None:
        """Test a failing entry does not stop the rest of the batch."""
        out = tmp_path / "out"
        out.mkdir()
        batch_file = self.write_batch(
            tmp_path / "batch.json",
            [
                {"products": [{"name": "a", "price": "1", "barcode": "1"}]},
                {
                    "products": [
                        {"name": "a", "price": "1", "barcode": "1"},
                        {"name": "b", "price": "2", "barcode": "2"},
                    ]
                },
            ],
        )

        result = runner.invoke(app, ["batch", str(batch_file), "--font", str(font_file), "--output-dir", str(out)])

        assert result.exit_code == 1
        assert not (out / "label_000_epl_output.bin").exists()
        assert (out / "label_001_epl_output.bin").exists()

    def test_malformed_file(self, font_file: Path, tmp_path: Path) -> None:
        batch_file = tmp_path / "batch.json"
        batch_file.write_text('{"not": "a list"}', encoding="utf-8")
        result = runner.invoke(app, ["batch", str(batch_file), "--font", str(font_file)])
        assert result.exit_code == 1

    def pair_entries(self) -> list[dict]:
        products = [
            {"name": "عصير", "price": "5.00", "barcode": "622300123456"},
            {"name": "مياه", "price": "3.50", "barcode": "622300654321"},
        ]
        return [{"products": products}, {"products": list(reversed(products))}]

    def test_default_sink_keeps_every_label(self, font_file: Path, tmp_path: Path) -> None:
        """Test a batch sent to the default file sink writes one file per label."""
        spool = tmp_path / "spool"
        spool.mkdir()
        batch_file = self.write_batch(tmp_path / "batch.json", self.pair_entries())

        with patch("epl2label.cli.app.default_sink", return_value=FileSink(spool)):
            result = runner.invoke(app, ["batch", str(batch_file), "--font", str(font_file), "-q"])

        assert result.exit_code == 0, result.output
        jobs = sorted(spool.iterdir())
        assert [job.name for job in jobs] == ["label_000_epl_output.bin", "label_001_epl_output.bin"]
        assert jobs[0].read_bytes() != jobs[1].read_bytes()

    def test_fallback_keeps_every_label(self, font_file: Path, tmp_path: Path) -> None:
        fallback = tmp_path / "fallback"
        fallback.mkdir()
        batch_file = self.write_batch(tmp_path / "batch.json", self.pair_entries())

        result = runner.invoke(
            app,
            [
                "batch",
                str(batch_file),
                "--font",
                str(font_file),
                "--device",
                str(tmp_path / "lp9"),
                "--fallback-dir",
                str(fallback),
                "-q",
            ],
        )

        assert result.exit_code == 0, result.output
        assert len(list(fallback.iterdir())) == 2
