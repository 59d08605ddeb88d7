#!/usr/bin/env python3
"""OWL load/save tests — owlready2 worlds, rdflib Turtle."""

import os
import sys
import tempfile
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from ontosat.errors import InvalidArgumentError, ParseFailureError, StorageFailureError
from ontosat.model import (
    THING,
    AtomicClass,
    ClassAssertion,
    Declaration,
    EquivalentClasses,
    Individual,
    Ontology,
    Property,
    PropertyAssertion,
)
from ontosat.owl_io import default_output_path, load_ontology, save_ontology

EX = "http://example.org/family"
NS = EX + "#"

ANN, BOB, CARL = Individual(NS + "ann"), Individual(NS + "bob"), Individual(NS + "carl")
PERSON = AtomicClass(NS + "Person")
HAS_CHILD_PERSON = AtomicClass(NS + "hasChildPerson")
HAS_CHILD, LIKES = Property(NS + "hasChild"), Property(NS + "likes")


def _family():
    return Ontology(EX, [
        Declaration(ANN), Declaration(BOB), Declaration(CARL),
        Declaration(PERSON), Declaration(HAS_CHILD_PERSON),
        Declaration(HAS_CHILD), Declaration(LIKES),
        ClassAssertion(BOB, PERSON),
        PropertyAssertion(ANN, HAS_CHILD, BOB),
        PropertyAssertion(BOB, LIKES, CARL),
        ClassAssertion(ANN, HAS_CHILD.some(PERSON)),
        ClassAssertion(ANN, HAS_CHILD.some(LIKES.some(THING))),
        EquivalentClasses(HAS_CHILD_PERSON, HAS_CHILD.some(PERSON)),
    ])


@pytest.mark.parametrize("format,suffix", [
    ("rdfxml", ".owl"),
    ("ntriples", ".nt"),
    ("turtle", ".ttl"),
])
def test_save_then_load_keeps_every_axiom(format, suffix):
    with tempfile.TemporaryDirectory() as tmp:
        path = save_ontology(_family(), Path(tmp) / f"family{suffix}", format)
        assert path.is_file()
        loaded = load_ontology(path)
    assert loaded.iri == EX
    assert loaded.axioms == _family().axioms


def test_save_creates_parent_directories():
    with tempfile.TemporaryDirectory() as tmp:
        path = save_ontology(_family(), os.path.join(tmp, "out", "nested", "family.owl"))
        assert path.is_file()


def test_untyped_individual_has_no_class_assertions():
    with tempfile.TemporaryDirectory() as tmp:
        loaded = load_ontology(save_ontology(_family(), Path(tmp) / "family.owl"))
    assert loaded.class_assertions(CARL) == []
    assert Declaration(CARL) in loaded


def test_load_errors():
    with pytest.raises(InvalidArgumentError, match="file cannot be None"):
        load_ontology(None)
    with pytest.raises(ParseFailureError):
        load_ontology("/nonexistent/family.owl")
    with tempfile.NamedTemporaryFile("w", suffix=".owl", delete=False) as f:
        f.write("<rdf:RDF><unclosed")
        path = f.name
    try:
        with pytest.raises(ParseFailureError):
            load_ontology(path)
    finally:
        os.unlink(path)


def test_save_errors():
    with pytest.raises(InvalidArgumentError):
        save_ontology(_family(), None)
    with pytest.raises(InvalidArgumentError, match="Invalid format"):
        save_ontology(_family(), "family.jsonld", "jsonld")


def test_default_output_path():
    assert default_output_path("onto/family.owl") == Path("onto/family-saturated.owl")
    assert default_output_path("family.owl", "-sat", "build", "turtle") == Path("build/family-sat.ttl")
    assert default_output_path("family.ttl", format="ntriples") == Path("family-saturated.nt")


def test_unwritable_destination_is_a_storage_failure():
    with tempfile.TemporaryDirectory() as tmp:
        blocker = Path(tmp) / "blocker"
        blocker.write_text("a regular file", encoding="utf-8")
        with pytest.raises(StorageFailureError, match="Cannot save ontology"):
            save_ontology(_family(), blocker / "family.owl")
        assert blocker.is_file()
