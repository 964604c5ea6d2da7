"""
Tests for the mmlayout command-line interface.
"""

import json
import logging

import pytest
import yaml

from mmlayout.cli import build_parser, main

REGISTERS_YAML = """
registers:
  - name: CTRL
    offset: 0x00
  - name: STATUS
    offset: 0x10
  - name: DATA
    offset: 0x20
"""


@pytest.fixture
def regs_file(tmp_path):
    path = tmp_path / "regs.yml"
    path.write_text(REGISTERS_YAML)
    return path


def test_repack_json(regs_file, capsys):
    assert main(["repack", str(regs_file), "--kind", "register", "--from", "1", "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["success"] is True
    assert [r["offset"] for r in out["items"]] == [0, 4, 8]


def test_repack_backward_yaml_stdout(regs_file, capsys):
    assert main(["repack", str(regs_file), "--kind", "register", "--from", "1", "--backward"]) == 0
    records = yaml.safe_load(capsys.readouterr().out)
    assert [r["offset"] for r in records] == [0x18, 0x1C, 0x20]


def test_insert_writes_output_file(regs_file, tmp_path, capsys):
    out_file = tmp_path / "out.yml"
    argv = ["insert", str(regs_file), "--kind", "register", "--anchor", "0", "-o", str(out_file)]
    assert main(argv) == 0
    assert "Written" in capsys.readouterr().out

    records = yaml.safe_load(out_file.read_text())
    assert [r["name"] for r in records] == ["CTRL", "reg1", "STATUS", "DATA"]
    assert [r["offset"] for r in records] == [0, 4, 8, 12]


def test_insert_before_rejected(regs_file, capsys):
    argv = ["insert", str(regs_file), "--kind", "register", "--anchor", "0", "--before", "--json"]
    assert main(argv) == 1
    out = json.loads(capsys.readouterr().out)
    assert out["success"] is False
    assert out["newIndex"] == -1
    assert out["error"] == "Cannot insert before: offset would be negative"


def test_insert_register_array(regs_file, capsys):
    argv = ["insert", str(regs_file), "--kind", "register", "--anchor", "0", "--array", "--json"]
    assert main(argv) == 0
    out = json.loads(capsys.readouterr().out)
    assert [r["name"] for r in out["items"]] == ["CTRL", "ARRAY_1", "STATUS", "DATA"]
    assert out["items"][1]["__kind"] == "array"
    assert out["newIndex"] == 1


def test_array_flag_needs_registers(regs_file, capsys):
    argv = ["insert", str(regs_file), "--kind", "block", "--array", "--json"]
    assert main(argv) == 1
    assert "cannot be inserted into a block list" in json.loads(capsys.readouterr().out)["error"]


def test_move_json(regs_file, capsys):
    argv = ["move", str(regs_file), "--kind", "register", "--index", "0", "--delta", "1", "--json"]
    assert main(argv) == 0
    out = json.loads(capsys.readouterr().out)
    assert [r["name"] for r in out["items"]] == ["STATUS", "CTRL", "DATA"]
    assert out["newIndex"] == 1


def test_remove_plain_error(regs_file, capsys):
    assert main(["remove", str(regs_file), "--kind", "register", "--index", "9"]) == 1
    assert "Error: Cannot remove: no register at index 9" in capsys.readouterr().out


def test_missing_input(tmp_path, capsys):
    missing = tmp_path / "nope.yml"
    assert main(["repack", str(missing), "--kind", "field"]) == 1
    assert "File not found" in capsys.readouterr().out


def test_field_register_width(tmp_path, capsys):
    path = tmp_path / "ctrl.yml"
    path.write_text("fields:\n  - name: data\n    bits: '[7:0]'\n")
    argv = ["insert", str(path), "--kind", "field", "--register-width", "8", "--json"]
    assert main(argv) == 1
    assert "outside register bounds" in json.loads(capsys.readouterr().out)["error"]


def test_kind_is_required():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["repack", "regs.yml"])


def test_verbose_logs_command(regs_file, caplog, capsys):
    caplog.set_level(logging.DEBUG, logger="mmlayout.cli")
    assert main(["-v", "remove", str(regs_file), "--kind", "register", "--index", "0"]) == 0
    assert f"Running remove on {regs_file} (register)" in caplog.messages
