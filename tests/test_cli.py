import json

import pytest
from click.testing import CliRunner

from conftest import make_gpt_header, make_protective_mbr
from ptlocator import __version__
from ptlocator.ui.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


def test_missing_argument_is_usage_error(runner):
    result = runner.invoke(cli, ["analyze"])
    assert result.exit_code == 2
    assert "Missing argument" in result.output


def test_missing_file_is_fatal(runner, tmp_path):
    result = runner.invoke(cli, ["analyze", str(tmp_path / "absent.img")])
    assert result.exit_code == 1
    assert "Cannot open disk image" in result.output


def test_short_file_is_fatal(runner, write_image):
    result = runner.invoke(cli, ["analyze", write_image(b"\x00" * 100)])
    assert result.exit_code == 1
    assert "Error reading MBR" in result.output


def test_mbr_report(runner, write_image, mbr_image):
    result = runner.invoke(cli, ["analyze", write_image(mbr_image)])

    assert result.exit_code == 0
    assert "Detected MBR disk" in result.output
    assert "2048" in result.output
    assert "204800" in result.output


def test_gpt_report(runner, write_image, gpt_image):
    result = runner.invoke(cli, ["analyze", write_image(gpt_image)])

    assert result.exit_code == 0
    assert "Detected GPT disk" in result.output
    assert "128" in result.output


def test_unrecognized_exits_zero(runner, write_image):
    result = runner.invoke(cli, ["analyze", write_image(b"\x00" * 1024)])

    assert result.exit_code == 0
    assert "Unknown disk format" in result.output


def test_truncated_gpt_reports_error_and_exits_zero(runner, write_image):
    result = runner.invoke(cli, ["analyze", write_image(make_protective_mbr())])

    assert result.exit_code == 0
    assert "Detected GPT disk" in result.output
    assert "Error reading GPT header" in result.output


def test_strict_flag_rejects_bad_signature(runner, write_image):
    image = make_protective_mbr() + make_gpt_header(signature=b"NOTAGPT!")

    lenient = runner.invoke(cli, ["analyze", write_image(image)])
    strict = runner.invoke(cli, ["analyze", "--strict", write_image(image, "strict.img")])

    assert lenient.exit_code == 0
    assert "Malformed" not in lenient.output
    assert strict.exit_code == 0
    assert "Malformed GPT header" in strict.output


def test_json_output(runner, write_image, gpt_image):
    result = runner.invoke(cli, ["analyze", "--json", write_image(gpt_image)])

    assert result.exit_code == 0
    data = json.loads(result.output)
    assert data["variant"] == "gpt"
    assert data["gpt"]["number_of_partitions"] == 128
    assert data["gpt"]["disk_guid"] == "101112131415161718191a1b1c1d1e1f"


def test_version(runner):
    result = runner.invoke(cli, ["version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_bracketed_signature_is_printed_not_parsed(runner, write_image):
    image = make_protective_mbr() + make_gpt_header(signature=b"[/]PART!")
    result = runner.invoke(cli, ["analyze", "--strict", write_image(image)])

    assert result.exit_code == 0
    assert "Malformed GPT header" in result.output
    assert "[/]PART!" in result.output


def test_bracketed_missing_path_is_reported(runner, tmp_path):
    result = runner.invoke(cli, ["analyze", str(tmp_path / "img[/x].bin")])

    assert result.exit_code == 1
    assert "Cannot open disk image" in result.output
