"""
Restricted axiom text parser — Manchester-style, one axiom per line.

Supported lines:

    Class: Parent                          declaration
    ObjectProperty: hasChild               declaration
    Individual: ann                        declaration
    ann Type: Person                       class assertion
    ann Type: hasChild some (likes some Cat)
    ann hasChild bob                       property assertion
    Parent EquivalentTo: hasChild some Person

Names are short forms of entities already in the ontology, or full IRIs
written as `<http://...>`. Declarations may introduce new names, minted in
the ontology's namespace. `#` starts a comment line.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable

from ontosat.errors import InvalidArgumentError, ParseFailureError
from ontosat.model import (
    THING,
    AtomicClass,
    Axiom,
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

_TOKEN = re.compile(r"<[^>\s]*>|\(|\)|[^\s()]+")

DECLARATION_KEYWORDS = {
    "Class:": AtomicClass,
    "ObjectProperty:": Property,
    "Individual:": Individual,
}
THING_NAMES = {"Thing", "owl:Thing", f"<{THING.iri}>"}
KIND_NAMES = {Individual: "individual", Property: "property", AtomicClass: "class"}


class _LineParser:
    def __init__(self, ontology: Ontology, line: str):
        self.ontology = ontology
        self.line = line
        self.tokens = _TOKEN.findall(line)
        self.pos = 0

    # ── token helpers ────────────────────────────────────────

    def fail(self, message: str) -> ParseFailureError:
        return ParseFailureError(f"{message} in {self.line.strip()!r}")

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self, what: str = "token") -> str:
        token = self.peek()
        if token is None:
            raise self.fail(f"Expected {what} at end of line")
        self.pos += 1
        return token

    def expect(self, token: str) -> None:
        found = self.take(repr(token))
        if found != token:
            raise self.fail(f"Expected {token!r}, found {found!r}")

    # ── names ────────────────────────────────────────────────

    def declare(self, token: str, kind: type):
        if token.startswith("<"):
            return kind(token[1:-1])
        return self.ontology.resolve(token, kind) or kind(self.ontology.namespace + token)

    def entity(self, token: str, kind: type):
        if token.startswith("<"):
            return kind(token[1:-1])
        found = self.ontology.resolve(token, kind)
        if found is None:
            raise self.fail(f"Unknown {KIND_NAMES[kind]} {token!r}")
        return found

    # ── grammar ──────────────────────────────────────────────

    def axiom(self) -> Axiom:
        first = self.take("axiom")
        if first in DECLARATION_KEYWORDS:
            axiom = Declaration(self.declare(self.take("name"), DECLARATION_KEYWORDS[first]))
        else:
            second = self.take("keyword or property")
            if second == "Type:":
                axiom = ClassAssertion(self.entity(first, Individual), self.expression())
            elif second == "EquivalentTo:":
                axiom = EquivalentClasses(self.entity(first, AtomicClass), self.expression())
            else:
                axiom = PropertyAssertion(
                    self.entity(first, Individual),
                    self.entity(second, Property),
                    self.entity(self.take("individual"), Individual),
                )
        if self.peek() is not None:
            raise self.fail(f"Unexpected {self.peek()!r}")
        return axiom

    def expression(self) -> ClassExpression:
        token = self.take("class expression")
        if token == "(":
            inner = self.expression()
            self.expect(")")
            return inner
        if self.peek() == "some":
            self.take()
            return ExistentialRestriction(self.entity(token, Property), self.expression())
        if token in THING_NAMES:
            return THING
        return self.entity(token, AtomicClass)


def parse_line(ontology: Ontology, line: str) -> Axiom:
    """Parse one axiom; names are resolved against *ontology*."""
    if line is None:
        raise InvalidArgumentError("line cannot be None")
    return _LineParser(ontology, line).axiom()


def parse_axioms(ontology: Ontology, lines: Iterable[str]) -> list[Axiom]:
    """Parse every axiom line and add them all to *ontology*.

    Names declared earlier in the text can be used further down. If any
    line fails, *ontology* is left as it was.
    """
    scratch = ontology.copy()
    axioms = []
    for number, line in enumerate(lines, 1):
        if not line.strip() or line.lstrip().startswith("#"):
            continue
        try:
            axiom = parse_line(scratch, line)
        except ParseFailureError as exc:
            raise ParseFailureError(f"line {number}: {exc}") from exc
        scratch.add(axiom)
        axioms.append(axiom)
    ontology.update(axioms)
    return axioms


def parse_axiom_file(ontology: Ontology, path: str | Path | None) -> list[Axiom]:
    if path is None:
        raise InvalidArgumentError("file cannot be None")
    try:
        with open(path, "r", encoding="utf-8") as fh:
            lines = fh.read().splitlines()
    except UnicodeDecodeError as exc:
        raise ParseFailureError(f"Axiom file {path} is not valid UTF-8: {exc}") from exc
    except OSError as exc:
        raise ParseFailureError(f"Cannot read axiom file {path}: {exc}") from exc
    return parse_axioms(ontology, lines)
