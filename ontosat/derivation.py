"""Derivation strategies — what a saturation step adds to the ontology.

Assertional mode states the existential as a fact about the subject:

    hasChild(ann, bob), Person(bob)   =>   (hasChild some Person)(ann)

Terminological mode names the existential as a class instead:

    Class: hasChildPerson
    hasChildPerson EquivalentTo: hasChild some Person

The mode is resolved to a strategy once, when the engine is built.
"""

from __future__ import annotations

from enum import Enum

from ontosat.errors import InvalidArgumentError
from ontosat.model import (
    AtomicClass,
    Axiom,
    ClassAssertion,
    ClassExpression,
    Declaration,
    EquivalentClasses,
    ExistentialRestriction,
    Individual,
    Property,
)
from ontosat.naming import mint_class_name


class SaturationMode(Enum):
    ASSERTIONAL = "assertional"
    TERMINOLOGICAL = "terminological"

    @classmethod
    def parse(cls, text: str | SaturationMode) -> SaturationMode:
        if isinstance(text, cls):
            return text
        try:
            return cls(str(text).strip().lower())
        except ValueError:
            choices = ", ".join(m.value for m in cls)
            raise InvalidArgumentError(
                f"Invalid saturation mode: {text!r} (expected one of: {choices})"
            ) from None


class DerivationStrategy:
    """Turns `subject --prop--> (something in filler)` into axioms."""

    mode: SaturationMode

    def derive(self, subject: Individual, prop: Property,
               filler: AtomicClass) -> set[Axiom]:
        """One hop: the target is asserted to be in the named class *filler*."""
        raise NotImplementedError

    def chain(self, subject: Individual, prop: Property,
              expression: ClassExpression) -> set[Axiom]:
        """Chained hop: the target was itself derived to be in *expression*."""
        raise NotImplementedError


class AssertionalDerivation(DerivationStrategy):
    mode = SaturationMode.ASSERTIONAL

    def derive(self, subject, prop, filler):
        return {ClassAssertion(subject, ExistentialRestriction(prop, filler))}

    def chain(self, subject, prop, expression):
        return {ClassAssertion(subject, ExistentialRestriction(prop, expression))}


class TerminologicalDerivation(DerivationStrategy):
    mode = SaturationMode.TERMINOLOGICAL

    def derive(self, subject, prop, filler):
        named = mint_class_name(prop, filler)
        return {
            Declaration(named),
            EquivalentClasses(named, ExistentialRestriction(prop, filler)),
        }

    def chain(self, subject, prop, expression):
        # Nested restrictions are not named; only one-hop classes are minted.
        return set()


def strategy_for(mode: SaturationMode | str) -> DerivationStrategy:
    mode = SaturationMode.parse(mode)
    if mode is SaturationMode.TERMINOLOGICAL:
        return TerminologicalDerivation()
    return AssertionalDerivation()
