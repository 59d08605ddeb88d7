#!/usr/bin/env python3
"""Command-line tests — flags, exit codes, output files."""

import json
import sys
import tempfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from ontosat.cli import main
from ontosat.model import (
    AtomicClass,
    ClassAssertion,
    Declaration,
    EquivalentClasses,
    Individual,
    Ontology,
    Property,
    PropertyAssertion,
)
from ontosat.owl_io import load_ontology, save_ontology

EX = "http://example.org/family"
NS = EX + "#"

ANN, BOB = Individual(NS + "ann"), Individual(NS + "bob")
PERSON = AtomicClass(NS + "Person")
HAS_CHILD = Property(NS + "hasChild")


def _write_family(directory):
    onto = Ontology(EX, [
        Declaration(ANN), Declaration(BOB), Declaration(PERSON), Declaration(HAS_CHILD),
        ClassAssertion(BOB, PERSON),
        PropertyAssertion(ANN, HAS_CHILD, BOB),
    ])
    return save_ontology(onto, Path(directory) / "family.owl")


def test_no_arguments_prints_help(capsys):
    assert main([]) == 0
    assert "--ontology" in capsys.readouterr().out


def test_missing_ontology_is_a_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["-m", "assertional"])
    assert exc.value.code == 2


def test_invalid_mode_is_a_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(["-i", "family.owl", "-m", "invalid"])
    assert exc.value.code == 2


def test_default_output_beside_input(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        input_path = _write_family(tmp)
        assert main(["-o", str(input_path)]) == 0
        output = Path(tmp) / "family-saturated.owl"
        assert output.is_file()
        saturated = load_ontology(output)
    assert ClassAssertion(ANN, HAS_CHILD.some(PERSON)) in saturated
    assert "1 derived" in capsys.readouterr().out


def test_terminological_json_summary(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        input_path = _write_family(tmp)
        output = Path(tmp) / "out" / "terms.ttl"
        code = main(["-o", str(input_path), "-O", str(output),
                     "-m", "terminological", "-f", "turtle", "--json"])
        assert code == 0
        saturated = load_ontology(output)
    named = AtomicClass(NS + "hasChildPerson")
    assert EquivalentClasses(named, HAS_CHILD.some(PERSON)) in saturated
    summary = json.loads(capsys.readouterr().out)
    assert summary["mode"] == "terminological"
    assert summary["derived_axioms"] == 2
    assert summary["derived_classes"] == 1
    assert summary["derived_assertions"] == 0


def test_config_file_sets_mode_and_suffix():
    with tempfile.TemporaryDirectory() as tmp:
        input_path = _write_family(tmp)
        config = Path(tmp) / "ontosat.yaml"
        config.write_text("mode: terminological\noutput_suffix: -full\n", encoding="utf-8")
        assert main(["-i", str(input_path), "-c", str(config)]) == 0
        saturated = load_ontology(Path(tmp) / "family-full.owl")
    assert Declaration(AtomicClass(NS + "hasChildPerson")) in saturated


def test_unreadable_input_exits_with_error(capsys):
    assert main(["-i", "/nonexistent/family.owl"]) == 1
    assert "Error while saturating" in capsys.readouterr().err


def test_bad_config_exits_with_error(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        config = Path(tmp) / "ontosat.yaml"
        config.write_text("mode: fuzzy\n", encoding="utf-8")
        assert main(["-i", "family.owl", "-c", str(config)]) == 1
    assert "Invalid saturation mode" in capsys.readouterr().err


def test_short_i_is_an_alias_for_the_input(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        input_path = _write_family(tmp)
        assert main(["-i", str(input_path), "-O", str(Path(tmp) / "out.owl")]) == 0
        assert (Path(tmp) / "out.owl").is_file()


def test_unwritable_output_exits_with_error(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        input_path = _write_family(tmp)
        blocker = Path(tmp) / "blocker"
        blocker.write_text("a regular file", encoding="utf-8")
        output = blocker / "family-saturated.owl"
        assert main(["-o", str(input_path), "-O", str(output)]) == 1
        assert not output.exists()
        assert sorted(p.name for p in Path(tmp).iterdir()) == ["blocker", "family.owl"]
    assert "Cannot save ontology" in capsys.readouterr().err


def test_axiom_file_that_is_not_utf8_exits_with_error(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        input_path = _write_family(tmp)
        axioms = Path(tmp) / "extra.txt"
        axioms.write_bytes(b"ann Type: \xff\xfe Person\n")
        assert main(["-o", str(input_path), "-a", str(axioms)]) == 1
        assert not (Path(tmp) / "family-saturated.owl").exists()
    assert "not valid UTF-8" in capsys.readouterr().err


def test_config_file_that_is_not_utf8_exits_with_error(capsys):
    with tempfile.TemporaryDirectory() as tmp:
        config = Path(tmp) / "ontosat.yaml"
        config.write_bytes(b"mode: \xff\xfe\n")
        assert main(["-o", "family.owl", "-c", str(config)]) == 1
    assert "not valid UTF-8" in capsys.readouterr().err
