"""
Tests for the command line entry point.
"""

import pytest

from propcollect import examples
from propcollect.cli import main, resolve_target


def test_resolve_nested_target():
    assert resolve_target("propcollect.examples:TestCar.Car.Interior") is examples.TestCar.Car.Interior


@pytest.mark.parametrize("target", [
    "propcollect.examples",
    "propcollect.examples:Missing",
    "propcollect.examples:build_type_mapping",
])
def test_resolve_invalid_target(target):
    with pytest.raises(ValueError):
        resolve_target(target)


def test_type_collection_with_descriptions(capsys):
    status = main(["propcollect.examples:TestCar", "--nested", "--source", examples.__file__])
    out = capsys.readouterr().out
    assert status == 0
    assert "TestCar.Car.Interior.number_seats\t\tNumber of seats inside the car." in out


def test_bound_lookup(capsys):
    status = main(["propcollect.examples:TestCar.Car", "--bind", "--lookup", "TestCar.Car.brand"])
    out = capsys.readouterr().out
    assert status == 0
    assert out.splitlines()[-1] == "brand Unknown"


def test_lookup_missing_path(capsys):
    status = main(["propcollect.examples:TestCar.Car", "--bind", "--lookup", "Car.nope"])
    assert status == 1
    assert "Key not found" in capsys.readouterr().err


def test_lookup_unbound_field(capsys):
    status = main(["propcollect.examples:TestCar.Car", "--lookup", "TestCar.Car.brand"])
    assert status == 1
    assert "no bound object" in capsys.readouterr().err


def test_bad_target(capsys):
    assert main(["no-colon-here"]) == 1
    assert "error:" in capsys.readouterr().err


def test_csv_and_config(tmp_path, capsys):
    config = tmp_path / "collect.yaml"
    csv_path = tmp_path / "out.csv"
    config.write_text(f"prefix_mode: none\nrecurse_nested: true\ncsv_path: {csv_path}\n")

    status = main(["propcollect.examples:TestCar.Car", "--config", str(config)])
    assert status == 0

    lines = csv_path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == "sep=,"
    assert lines[1].startswith("Car,brand,Car.brand,TestCar.Car,,")
    assert any(line.startswith("Interior,number_seats,Car.Interior.number_seats,") for line in lines)


SETTINGS_SOURCE = (
    "class Settings:\n"
    "    #: Request timeout in seconds.\n"
    "    timeout: int\n"
    "    retries: int = 3\n"
)


@pytest.fixture
def settings_module(tmp_path, monkeypatch):
    (tmp_path / "settings_decls.py").write_text(SETTINGS_SOURCE)
    monkeypatch.syspath_prepend(str(tmp_path))
    return "settings_decls"


def test_bind_with_unset_annotated_attribute(settings_module, capsys):
    status = main([f"{settings_module}:Settings", "--bind"])
    out = capsys.readouterr().out.splitlines()
    assert status == 0
    assert out == [
        "Settings\ttimeout\tSettings.timeout\t\t",
        "Settings\tretries\tSettings.retries\t3\t",
    ]


def test_lookup_unset_annotated_attribute(settings_module, capsys):
    status = main([f"{settings_module}:Settings", "--bind", "--lookup", "Settings.timeout"])
    assert status == 1
    assert "has no attribute 'timeout'" in capsys.readouterr().err


def test_missing_path_message_is_not_quoted(capsys):
    main(["propcollect.examples:TestCar.Car", "--lookup", "Car.nope"])
    assert capsys.readouterr().err.splitlines()[-1] == "error: Key not found: 'Car.nope'"
