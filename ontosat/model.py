"""
OntoSat domain model — individuals, properties, class expressions and axioms.

Everything here is an immutable value keyed by IRI, except `Ontology`,
which is a growing set of axioms. The saturator only ever adds axioms to
an ontology; nothing in the package removes one.

Axioms form a closed family:

  Declaration(entity)                          entity is a class, property or individual
  ClassAssertion(individual, expression)       C(a)
  PropertyAssertion(subject, property, object) r(a, b)
  EquivalentClasses(first, second)             A ≡ B

Class expressions are either an AtomicClass or an ExistentialRestriction
(`r some C`), nested to any depth.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Union


OWL_NAMESPACE = "http://www.w3.org/2002/07/owl#"


# ═══════════════════════════════════════════════════════════════
# IRI helpers
# ═══════════════════════════════════════════════════════════════

def split_iri(iri: str) -> tuple[str, str]:
    """Split an IRI after its last '#' or '/' into (namespace, local name)."""
    cut = max(iri.rfind("#"), iri.rfind("/"))
    if cut < 0:
        return "", iri
    return iri[:cut + 1], iri[cut + 1:]


def as_namespace(iri: str) -> str:
    """Ontology IRI -> namespace used for minting entities."""
    if iri.endswith(("#", "/")):
        return iri
    return iri + "#"


# ═══════════════════════════════════════════════════════════════
# Entities
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True, order=True)
class _Entity:
    iri: str

    @property
    def namespace(self) -> str:
        return split_iri(self.iri)[0]

    @property
    def name(self) -> str:
        return split_iri(self.iri)[1]

    def __str__(self) -> str:
        return self.name or self.iri


@dataclass(frozen=True, order=True)
class Individual(_Entity):
    """A named individual of the ABox."""
    pass


@dataclass(frozen=True, order=True)
class Property(_Entity):
    """A named object property (role)."""

    def some(self, filler: ClassExpression) -> ExistentialRestriction:
        return ExistentialRestriction(self, filler)


@dataclass(frozen=True, order=True)
class AtomicClass(_Entity):
    """A named class."""
    pass


THING = AtomicClass(OWL_NAMESPACE + "Thing")


@dataclass(frozen=True, eq=False)
class ExistentialRestriction:
    """`property some filler`.

    Hash and equality walk the filler chain iteratively; the hash is cached
    at construction, so chains thousands of hops deep stay cheap.
    """
    property: Property
    filler: ClassExpression

    def __post_init__(self):
        object.__setattr__(self, "_hash", hash((self.property, self.filler)))

    def __hash__(self) -> int:
        return self._hash

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExistentialRestriction):
            return NotImplemented
        a, b = self, other
        while isinstance(a, ExistentialRestriction):
            if a is b:
                return True
            if (not isinstance(b, ExistentialRestriction) or a._hash != b._hash
                    or a.property != b.property):
                return False
            a, b = a.filler, b.filler
        return a == b

    def __str__(self) -> str:
        return render(self)


ClassExpression = Union[AtomicClass, ExistentialRestriction]
Entity = Union[Individual, Property, AtomicClass]


def render(expression: ClassExpression) -> str:
    """Manchester-style text for a class expression, e.g. `r some (s some C)`."""
    props = []
    while isinstance(expression, ExistentialRestriction):
        props.append(expression.property)
        expression = expression.filler
    if not isinstance(expression, AtomicClass):
        raise TypeError(f"Not a class expression: {expression!r}")
    text = str(expression)
    for i, prop in enumerate(reversed(props)):
        text = f"{prop} some {text}" if i == 0 else f"{prop} some ({text})"
    return text


def depth(expression: ClassExpression) -> int:
    """Number of nested restrictions, 0 for an atomic class."""
    n = 0
    while isinstance(expression, ExistentialRestriction):
        n += 1
        expression = expression.filler
    return n


# ═══════════════════════════════════════════════════════════════
# Axioms
# ═══════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Declaration:
    entity: Entity

    def __str__(self) -> str:
        kind = {Individual: "Individual", Property: "ObjectProperty",
                AtomicClass: "Class"}[type(self.entity)]
        return f"{kind}: {self.entity}"


@dataclass(frozen=True)
class ClassAssertion:
    individual: Individual
    class_expression: ClassExpression

    def __str__(self) -> str:
        return f"{self.individual} Type: {render(self.class_expression)}"


@dataclass(frozen=True)
class PropertyAssertion:
    subject: Individual
    property: Property
    object: Individual

    def __str__(self) -> str:
        return f"{self.subject} {self.property} {self.object}"


@dataclass(frozen=True)
class EquivalentClasses:
    first: ClassExpression
    second: ClassExpression

    def __str__(self) -> str:
        return f"{render(self.first)} EquivalentTo: {render(self.second)}"


Axiom = Union[Declaration, ClassAssertion, PropertyAssertion, EquivalentClasses]
AXIOM_TYPES = (Declaration, ClassAssertion, PropertyAssertion, EquivalentClasses)


def _expression_entities(expression: ClassExpression) -> Iterator[Entity]:
    while isinstance(expression, ExistentialRestriction):
        yield expression.property
        expression = expression.filler
    if not isinstance(expression, AtomicClass):
        raise TypeError(f"Not a class expression: {expression!r}")
    yield expression


def axiom_entities(axiom: Axiom) -> Iterator[Entity]:
    """Every entity mentioned by *axiom* (its signature)."""
    if isinstance(axiom, Declaration):
        yield axiom.entity
    elif isinstance(axiom, ClassAssertion):
        yield axiom.individual
        yield from _expression_entities(axiom.class_expression)
    elif isinstance(axiom, PropertyAssertion):
        yield axiom.subject
        yield axiom.property
        yield axiom.object
    elif isinstance(axiom, EquivalentClasses):
        yield from _expression_entities(axiom.first)
        yield from _expression_entities(axiom.second)
    else:
        raise TypeError(f"Not an axiom: {axiom!r}")


def sort_key(axiom: Axiom) -> tuple:
    """Stable ordering for axioms, used wherever iteration order is visible."""
    return type(axiom).__name__, tuple((type(e).__name__, e.iri) for e in axiom_entities(axiom))


# ═══════════════════════════════════════════════════════════════
# Ontology
# ═══════════════════════════════════════════════════════════════

class Ontology:
    """A set of axioms plus the IRI whose namespace new classes are minted in."""

    def __init__(self, iri: str, axioms: Iterable[Axiom] = ()):
        self.iri = iri
        self._axioms: set = set()
        self._types: dict[Individual, set] = {}
        self.update(axioms)

    def __repr__(self) -> str:
        return f"Ontology({self.iri!r}, {len(self._axioms)} axioms)"

    # ── mutation (add-only) ──────────────────────────────────

    def add(self, axiom: Axiom) -> bool:
        """Add one axiom. Returns False if it was already present."""
        if axiom in self._axioms:
            return False
        if not isinstance(axiom, AXIOM_TYPES):
            raise TypeError(f"Not an axiom: {axiom!r}")
        self._axioms.add(axiom)
        if isinstance(axiom, ClassAssertion):
            self._types.setdefault(axiom.individual, set()).add(axiom.class_expression)
        return True

    def update(self, axioms: Iterable[Axiom]) -> int:
        """Add many axioms; returns how many were new."""
        return sum(1 for axiom in axioms if self.add(axiom))

    def copy(self, iri: str | None = None) -> Ontology:
        return Ontology(iri or self.iri, self._axioms)

    # ── queries ──────────────────────────────────────────────

    @property
    def axioms(self) -> frozenset:
        return frozenset(self._axioms)

    @property
    def namespace(self) -> str:
        return as_namespace(self.iri)

    def __len__(self) -> int:
        return len(self._axioms)

    def __iter__(self) -> Iterator[Axiom]:
        return iter(sorted(self._axioms, key=sort_key))

    def __contains__(self, axiom: object) -> bool:
        return axiom in self._axioms

    def signature(self) -> set:
        entities = set()
        for axiom in self._axioms:
            entities.update(axiom_entities(axiom))
        return entities

    def individuals(self) -> list[Individual]:
        """Individuals in the signature, in signature order (sorted by IRI)."""
        return sorted(e for e in self.signature() if isinstance(e, Individual))

    def classes(self) -> list[AtomicClass]:
        return sorted(e for e in self.signature() if isinstance(e, AtomicClass))

    def properties(self) -> list[Property]:
        return sorted(e for e in self.signature() if isinstance(e, Property))

    def property_assertions(self) -> list[PropertyAssertion]:
        found = [a for a in self._axioms if isinstance(a, PropertyAssertion)]
        return sorted(found, key=lambda a: (a.subject, a.property, a.object))

    def class_assertions(self, individual: Individual) -> list[ClassAssertion]:
        expressions = self._types.get(individual, ())
        return sorted((ClassAssertion(individual, e) for e in expressions), key=sort_key)

    def atomic_types(self, individual: Individual) -> list[AtomicClass]:
        """Named classes *individual* is asserted to belong to."""
        return sorted(e for e in self._types.get(individual, ()) if isinstance(e, AtomicClass))

    def resolve(self, name: str, kind: type) -> Entity | None:
        """Find the entity of *kind* whose local name (or full IRI) is *name*."""
        matches = [e for e in self.signature()
                   if isinstance(e, kind) and name in (e.name, e.iri)]
        return min(matches) if matches else None
