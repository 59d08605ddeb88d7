"""
Saturator — loads an ontology, saturates it, hands back the result.

Usage:
    from ontosat.saturator import Saturator
    from ontosat.derivation import SaturationMode

    saturator = Saturator.from_file("family.owl", SaturationMode.TERMINOLOGICAL)
    saturated = saturator.saturate()
"""

from __future__ import annotations

import logging
from pathlib import Path

from ontosat.derivation import SaturationMode
from ontosat.engine import saturate
from ontosat.errors import InvalidArgumentError
from ontosat.model import Axiom, Ontology

logger = logging.getLogger(__name__)


class Saturator:
    """Saturates one input ontology; every `saturate()` call starts fresh."""

    def __init__(self, ontology: Ontology | None,
                 mode: SaturationMode | str = SaturationMode.ASSERTIONAL):
        if ontology is None:
            raise InvalidArgumentError("ontology cannot be None")
        self.ontology = ontology
        self.mode = SaturationMode.parse(mode)
        self.saturated: Ontology | None = None

    @classmethod
    def from_file(cls, path: str | Path | None,
                  mode: SaturationMode | str = SaturationMode.ASSERTIONAL,
                  axioms_path: str | Path | None = None) -> Saturator:
        """Load *path*, optionally extended with the axioms listed in *axioms_path*."""
        from ontosat.axiom_parser import parse_axiom_file
        from ontosat.owl_io import load_ontology

        ontology = load_ontology(path)
        if axioms_path is not None:
            added = parse_axiom_file(ontology, axioms_path)
            logger.info("Added %d axioms from %s", len(added), axioms_path)
        return cls(ontology, mode)

    def saturate(self) -> Ontology:
        logger.info("Saturating %s (%s mode, %d axioms)",
                    self.ontology.iri, self.mode.value, len(self.ontology))
        self.saturated = saturate(self.ontology, self.mode)
        return self.saturated

    def derived(self) -> set[Axiom]:
        """Axioms the last `saturate()` added to the input."""
        if self.saturated is None:
            return set()
        return set(self.saturated.axioms - self.ontology.axioms)
