from datetime import date, datetime, timezone

import pytest
from dynaconf import ValidationError

from evm_etl.utils import hex_to_bool, hex_to_int, int_to_hex, load_config, unix_to_utc


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0x0", 0),
        ("0x1", 1),
        ("0xff", 255),
        ("0xFF", 255),
        ("0x5208", 21000),
        ("0x" + "f" * 64, 2 ** 256 - 1),
        ("ff", 255),
    ],
)
def test_hex_to_int_decodes_hex_quantities(value, expected):
    assert hex_to_int(value) == expected


@pytest.mark.parametrize("value", ["", "0x", "invalid", "0xzz", "0x 1", " 0x1", "0x1_0", "-0x1", None, 12, 1.5])
def test_hex_to_int_falls_back_to_zero(value):
    assert hex_to_int(value) == 0


@pytest.mark.parametrize("number", [0, 1, 15, 16, 21000, 2 ** 255 + 7])
def test_hex_to_int_reverses_hex_encoding(number):
    assert hex_to_int(hex(number)) == number


@pytest.mark.parametrize(
    "value, expected",
    [
        ("0x1", True),
        ("0x01", True),
        ("0x0", False),
        ("0x2", False),
        ("invalid", False),
        ("", False),
        (None, False),
    ],
)
def test_hex_to_bool(value, expected):
    assert hex_to_bool(value) is expected


def test_int_to_hex_is_lowercase_and_prefixed():
    assert int_to_hex(0) == "0x0"
    assert int_to_hex(255) == "0xff"


def test_int_to_hex_rejects_negative_heights():
    with pytest.raises(ValueError):
        int_to_hex(-1)


def test_unix_to_utc():
    assert unix_to_utc(0x60000000) == datetime(2021, 1, 14, 8, 25, 36, tzinfo=timezone.utc)
    assert unix_to_utc(0x60000000, date_only=True) == date(2021, 1, 14)


CONFIG = """
chain:
  name: linea
  rpc_url: "http://node.test:8545"
range:
  start: 10
  count: 3
"""


def test_load_config_applies_defaults(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yml"
    config_file.write_text(CONFIG)

    config = load_config(str(config_file))

    assert config.chain.name == "linea"
    assert config.range.start == 10
    assert config.range.count == 3
    assert config.storage.type == "json"
    assert config.writer.max_rows == 1000
    assert config.output.print_output is False
    assert list(config.datasets) == ["blocks", "transactions", "receipts"]


def test_load_config_reads_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yml"
    config_file.write_text(CONFIG)
    monkeypatch.setenv("EVM_ETL_RANGE__start", "42")
    monkeypatch.setenv("EVM_ETL_OUTPUT__print_output", "true")

    config = load_config(str(config_file))

    assert config.range.start == 42
    assert config.output.print_output is True


def test_load_config_requires_rpc_url(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yml"
    config_file.write_text("chain:\n  name: ethereum\n")

    with pytest.raises(ValidationError):
        load_config(str(config_file))


def test_load_config_requires_bigquery_project(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yml"
    config_file.write_text(CONFIG + "storage:\n  type: bigquery\n")

    with pytest.raises(ValidationError):
        load_config(str(config_file))


@pytest.mark.parametrize("datasets", ["[blocks, logs]", "[]"])
def test_load_config_rejects_unknown_datasets(tmp_path, monkeypatch, datasets):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yml"
    config_file.write_text(CONFIG + f"datasets: {datasets}\n")

    with pytest.raises(ValidationError):
        load_config(str(config_file))


@pytest.mark.parametrize("deadline", ["0", "-5", "soon"])
def test_load_config_rejects_invalid_deadline(tmp_path, monkeypatch, deadline):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yml"
    config_file.write_text(CONFIG + f"run:\n  deadline: {deadline}\n")

    with pytest.raises(ValidationError):
        load_config(str(config_file))


def test_load_config_accepts_positive_deadline(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    config_file = tmp_path / "config.yml"
    config_file.write_text(CONFIG + "run:\n  deadline: 3600\n")

    assert load_config(str(config_file)).run.deadline == 3600
