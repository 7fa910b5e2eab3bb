import sys
import os
import logging
import pytest

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, PROJECT_ROOT)

from meshparser import driver, post
from meshparser.config import ParserSettings
from meshparser.io import read_msh
from meshparser.elements import ElementKind, GMSH_ELEMENT_SCHEMA


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("meshparser")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


# Two hexahedra written with Gmsh element codes (5 = 8-node hexahedron)
BLOCK = """$MeshFormat
2.2 0 8
$EndMeshFormat
$PhysicalNames
1
3 1 "Solid block"
$EndPhysicalNames
$Nodes
12
1 0 0 0
2 1 0 0
3 2 0 0
4 0 1 0
5 1 1 0
6 2 1 0
7 0 0 1
8 1 0 1
9 2 0 1
10 0 1 1
11 1 1 1
12 2 1 1
$EndNodes
$Elements
2
1 5 2 1 1 1 2 5 4 7 8 11 10
2 5 2 1 1 2 3 6 5 8 9 12 11
$EndElements
"""


def _write(tmp_path, name, text):
    p = tmp_path / name
    p.write_text(text)
    return str(p)


def test_driver_prints_summary(tmp_path, capsys):
    path = _write(tmp_path, "block.msh", BLOCK)
    rc = driver.main([path, "--gmsh-numbering"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "File version            : 2.2" in out
    assert "ASCII MSH File" in out
    assert "Physical Names Count    : 1" in out
    assert "Nodes Count             : 12" in out
    assert "Elements Count          : 2" in out
    assert "Hexa8" in out
    assert "Solid block" in out
    assert "Validation errors" not in out


def test_driver_writes_report(tmp_path):
    path = _write(tmp_path, "block.msh", BLOCK)
    report = str(tmp_path / "block_summary.txt")
    result, errors = driver.run(path, report_path=report, gmsh_numbering=True)
    assert errors == []
    assert result.elements[0].kind is ElementKind.HEXA8
    assert os.path.exists(report)
    txt = open(report, "r", encoding="utf-8").read()
    assert txt.startswith(path)
    assert "Elements Count          : 2" in txt


def test_driver_reports_parse_error(tmp_path, capsys):
    # With the default table code 5 is a 5-node pyramid, so the second
    # record is read from the middle of the first and hits type code 11.
    path = _write(tmp_path, "block.msh", BLOCK)
    rc = driver.main([path])
    assert rc == 1
    err = capsys.readouterr().err
    assert err.startswith("Error:")


def test_driver_missing_file(tmp_path, capsys):
    rc = driver.main([str(tmp_path / "nope.msh")])
    assert rc == 1
    assert "not found" in capsys.readouterr().err


def test_driver_lists_validation_errors(tmp_path, capsys):
    text = BLOCK.replace("2 5 2 1 1 2 3 6 5 8 9 12 11", "2 5 2 1 1 2 3 6 5 8 9 12 42")
    path = _write(tmp_path, "bad.msh", text)
    rc = driver.main([path, "--gmsh-numbering"])
    assert rc == 0
    captured = capsys.readouterr()
    out = captured.out
    assert "Validation errors:" in out
    assert out.count("undefined nodes [42]") == 1
    assert "undefined nodes" not in captured.err


def test_summary_includes_warnings(tmp_path):
    path = _write(tmp_path, "v25.msh", BLOCK.replace("2.2 0 8", "2.5 0 8"))
    result = read_msh(path, ParserSettings(element_schema=dict(GMSH_ELEMENT_SCHEMA)))
    text = post.format_summary(result)
    assert "WARNINGS" in text
    assert "2.5" in text


def test_driver_logs_version_warning_to_stderr(tmp_path, capsys):
    path = _write(tmp_path, "v25.msh", BLOCK.replace("2.2 0 8", "2.5 0 8"))
    rc = driver.main([path, "--gmsh-numbering"])
    assert rc == 0
    captured = capsys.readouterr()
    assert "WARNING: format version 2.5" in captured.err
    assert "WARNING:" not in captured.out


def test_driver_log_file_keeps_debug_records(tmp_path, capsys):
    path = _write(tmp_path, "block.msh", BLOCK)
    log_path = tmp_path / "debug.log"
    rc = driver.main([path, "--gmsh-numbering", "--log-file", str(log_path)])
    assert rc == 0
    # console stays at WARNING
    assert "read 12 nodes" not in capsys.readouterr().err
    assert "read 12 nodes" in log_path.read_text(encoding="utf-8")
