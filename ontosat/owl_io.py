"""
OWL file I/O — owlready2 worlds in, model ontologies out (and back).

Every load and save runs in its own owlready2 World, so nothing leaks
between ontologies. Turtle is not read or written by owlready2 itself;
it goes through rdflib as N-Triples.

Translated constructs:

  owl:Class / owl:ObjectProperty / owl:NamedIndividual   Declaration
  individual rdf:type C, or rdf:type (r some ...)        ClassAssertion
  r(a, b) between named individuals                      PropertyAssertion
  C owl:equivalentClass (r some ...)                     EquivalentClasses

Anything else (data properties, annotations, subclass axioms, other
restriction kinds) is left out of the model.
"""

from __future__ import annotations

import io
import logging
import types
from pathlib import Path

import rdflib
from owlready2 import SOME, ObjectProperty, ObjectPropertyClass, Restriction, Thing, ThingClass, World
from rdflib.namespace import OWL, RDF

from ontosat.errors import InvalidArgumentError, ParseFailureError, StorageFailureError
from ontosat.model import (
    THING,
    AtomicClass,
    ClassAssertion,
    ClassExpression,
    Declaration,
    EquivalentClasses,
    ExistentialRestriction,
    Individual,
    Ontology,
    Property,
    PropertyAssertion,
)

logger = logging.getLogger(__name__)

FORMATS = ("rdfxml", "ntriples", "turtle")
EXTENSIONS = {"rdfxml": ".owl", "ntriples": ".nt", "turtle": ".ttl"}
TURTLE_SUFFIXES = (".ttl", ".turtle")
# anything else is left to owlready2 to guess
LOAD_FORMATS = {".owl": "rdfxml", ".rdf": "rdfxml", ".nt": "ntriples"}


# ═══════════════════════════════════════════════════════════════
# 1. LOAD
# ═══════════════════════════════════════════════════════════════

def load_ontology(path: str | Path | None) -> Ontology:
    """Read an ontology file into the model."""
    if path is None:
        raise InvalidArgumentError("file cannot be None")
    path = Path(path)
    if not path.is_file():
        raise ParseFailureError(f"Cannot read ontology file: {path}")

    world = World()
    suffix = path.suffix.lower()
    try:
        if suffix in TURTLE_SUFFIXES:
            onto = _load_turtle(world, path)
        else:
            with open(path, "rb") as fh:
                onto = world.get_ontology(path.resolve().as_uri()).load(
                    fileobj=fh, format=LOAD_FORMATS.get(suffix))
    except Exception as exc:
        raise ParseFailureError(f"Cannot parse ontology {path}: {exc}") from exc

    ontology = owl_to_model(onto)
    logger.info("Loaded %s: %d axioms", path, len(ontology))
    return ontology


def _load_turtle(world, path: Path):
    graph = rdflib.Graph()
    graph.parse(str(path), format="turtle")
    declared = graph.value(predicate=RDF.type, object=OWL.Ontology)
    base_iri = str(declared) if declared is not None else path.resolve().as_uri()
    data = graph.serialize(format="nt")
    if isinstance(data, str):
        data = data.encode("utf-8")
    return world.get_ontology(base_iri).load(fileobj=io.BytesIO(data), format="ntriples")


def _expression(construct) -> ClassExpression | None:
    if isinstance(construct, ThingClass):
        return AtomicClass(construct.iri)
    if isinstance(construct, Restriction) and construct.type == SOME:
        if not isinstance(construct.property, ObjectPropertyClass):
            return None
        filler = _expression(construct.value)
        if filler is None:
            return None
        return ExistentialRestriction(Property(construct.property.iri), filler)
    return None


def owl_to_model(onto) -> Ontology:
    """Translate an owlready2 ontology (without its imports) into the model."""
    base = onto.base_iri
    ontology = Ontology(base[:-1] if base.endswith("#") else base)

    for cls in onto.classes():
        named = AtomicClass(cls.iri)
        ontology.add(Declaration(named))
        for construct in cls.equivalent_to:
            expression = _expression(construct)
            if expression is None:
                logger.debug("Skipping equivalent_to %s of %s", construct, cls.iri)
                continue
            ontology.add(EquivalentClasses(named, expression))

    for prop in onto.object_properties():
        ontology.add(Declaration(Property(prop.iri)))

    for ind in onto.individuals():
        individual = Individual(ind.iri)
        ontology.add(Declaration(individual))
        for construct in ind.is_a:
            # owlready2 types every bare individual as owl:Thing
            if construct is Thing:
                continue
            expression = _expression(construct)
            if expression is None:
                logger.debug("Skipping type %s of %s", construct, ind.iri)
                continue
            ontology.add(ClassAssertion(individual, expression))
        for prop in ind.get_properties():
            if not isinstance(prop, ObjectPropertyClass):
                continue
            for value in prop[ind]:
                if isinstance(value, Thing):
                    ontology.add(PropertyAssertion(individual, Property(prop.iri),
                                                   Individual(value.iri)))
    return ontology


# ═══════════════════════════════════════════════════════════════
# 2. SAVE
# ═══════════════════════════════════════════════════════════════

class _OwlBuilder:
    """Materialises model entities and axioms inside one owlready2 ontology."""

    def __init__(self, onto):
        self.onto = onto
        self.entities = {}

    def _namespace(self, entity):
        return self.onto.get_namespace(entity.namespace)

    def owl_class(self, cls: AtomicClass):
        if cls == THING:
            return Thing
        if cls not in self.entities:
            with self._namespace(cls):
                self.entities[cls] = types.new_class(cls.name, (Thing,))
        return self.entities[cls]

    def owl_property(self, prop: Property):
        if prop not in self.entities:
            with self._namespace(prop):
                self.entities[prop] = types.new_class(prop.name, (ObjectProperty,))
        return self.entities[prop]

    def owl_individual(self, individual: Individual):
        if individual not in self.entities:
            self.entities[individual] = Thing(individual.name,
                                              namespace=self._namespace(individual))
        return self.entities[individual]

    def owl_expression(self, expression: ClassExpression):
        props = []
        while isinstance(expression, ExistentialRestriction):
            props.append(expression.property)
            expression = expression.filler
        if not isinstance(expression, AtomicClass):
            raise TypeError(f"Not a class expression: {expression!r}")
        construct = self.owl_class(expression)
        for prop in reversed(props):
            construct = self.owl_property(prop).some(construct)
        return construct

    def add(self, axiom) -> None:
        if isinstance(axiom, Declaration):
            entity = axiom.entity
            if isinstance(entity, AtomicClass):
                self.owl_class(entity)
            elif isinstance(entity, Property):
                self.owl_property(entity)
            else:
                self.owl_individual(entity)
        elif isinstance(axiom, ClassAssertion):
            ind = self.owl_individual(axiom.individual)
            construct = self.owl_expression(axiom.class_expression)
            if construct not in ind.is_a:
                ind.is_a.append(construct)
        elif isinstance(axiom, PropertyAssertion):
            prop = self.owl_property(axiom.property)
            prop[self.owl_individual(axiom.subject)].append(self.owl_individual(axiom.object))
        elif isinstance(axiom, EquivalentClasses):
            first, second = axiom.first, axiom.second
            if not isinstance(first, AtomicClass):
                first, second = second, first
            if not isinstance(first, AtomicClass):
                logger.debug("Skipping equivalence without a named class: %s", axiom)
                return
            self.owl_class(first).equivalent_to.append(self.owl_expression(second))
        else:
            raise TypeError(f"Not an axiom: {axiom!r}")

    def finish(self) -> None:
        # individuals are created as owl:Thing; drop it once they have a real type
        for entity, owl_entity in self.entities.items():
            if isinstance(entity, Individual) and len(owl_entity.is_a) > 1 \
                    and Thing in owl_entity.is_a:
                owl_entity.is_a.remove(Thing)


def model_to_owl(ontology: Ontology, world=None):
    """Build an owlready2 ontology holding every axiom of *ontology*."""
    world = world or World()
    onto = world.get_ontology(ontology.iri)
    builder = _OwlBuilder(onto)
    with onto:
        for axiom in ontology:
            builder.add(axiom)
        builder.finish()
    return onto


def save_ontology(ontology: Ontology, path: str | Path | None, format: str = "rdfxml") -> Path:
    """Write *ontology* to *path* as RDF/XML, N-Triples or Turtle."""
    if path is None:
        raise InvalidArgumentError("file cannot be None")
    if format not in FORMATS:
        raise InvalidArgumentError(
            f"Invalid format: {format!r} (expected one of: {', '.join(FORMATS)})"
        )
    path = Path(path)
    onto = model_to_owl(ontology)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        if format == "turtle":
            _save_turtle(onto, path)
        else:
            onto.save(file=str(path), format=format)
    except Exception as exc:
        raise StorageFailureError(f"Cannot save ontology to {path}: {exc}") from exc
    logger.info("Ontology saved at: %s", path)
    return path


def _save_turtle(onto, path: Path) -> None:
    buffer = io.BytesIO()
    onto.save(file=buffer, format="ntriples")
    graph = rdflib.Graph()
    graph.parse(data=buffer.getvalue().decode("utf-8"), format="nt")
    graph.bind("owl", OWL)
    graph.serialize(destination=str(path), format="turtle")


def default_output_path(input_path: str | Path, suffix: str = "-saturated",
                        output_dir: str | Path | None = None,
                        format: str = "rdfxml") -> Path:
    """`family.owl` -> `family-saturated.owl`, beside the input unless *output_dir*."""
    input_path = Path(input_path)
    directory = Path(output_dir) if output_dir else input_path.parent
    return directory / f"{input_path.stem}{suffix}{EXTENSIONS.get(format, '.owl')}"
