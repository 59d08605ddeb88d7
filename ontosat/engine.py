"""
Saturation engine — depth-first closure over the relation graph.

For every edge `n --P--> u`:

  1. object classes: each named class C of u (owl:Thing if u has none)
     gives `derive(n, p, C)` for every p in P;
  2. chaining: every class assertion about u in u's derived set gives
     `chain(n, p, E)`, so `r(a,b), s(b,c), C(c)` yields
     `(r some (s some C))(a)`.

Node states follow UNVISITED -> EXPLORING -> DONE. A DONE node's result is
memoised. An edge back into an EXPLORING node (a cycle) does not descend
again; it reads whatever that node has accumulated so far. Cyclic chains
are therefore derived from a partial result, not closed to a fixpoint.

The traversal runs on an explicit stack, so path length is not bounded
by the interpreter's recursion limit.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable

from ontosat.derivation import DerivationStrategy, SaturationMode, strategy_for
from ontosat.graph import RelationGraph, build_graph
from ontosat.model import THING, Axiom, ClassAssertion, Individual, Ontology, Property

logger = logging.getLogger(__name__)


class NodeStatus(Enum):
    UNVISITED = "unvisited"
    EXPLORING = "exploring"
    DONE = "done"


class _Frame:
    """One node on the DFS stack, paused between edges."""

    __slots__ = ("node", "edges", "pending")

    def __init__(self, node: Individual, edges):
        self.node = node
        self.edges = edges
        # (child, properties) while waiting for the child to finish
        self.pending: tuple[Individual, set[Property]] | None = None


class SaturationEngine:
    """Runs one saturation pass. Build a new engine for every pass."""

    def __init__(self, graph: RelationGraph, output: Ontology,
                 strategy: DerivationStrategy):
        self.graph = graph
        self.output = output
        self.strategy = strategy
        self.status: dict[Individual, NodeStatus] = {
            node: NodeStatus.UNVISITED for node in graph.nodes()
        }
        # partial while EXPLORING, final (memoised) once DONE
        self.results: dict[Individual, set[Axiom]] = {}

    # ── driver ───────────────────────────────────────────────

    def run(self, individuals: Iterable[Individual]) -> set[Axiom]:
        """Visit every still-unvisited individual; merge results into the output."""
        derived: set[Axiom] = set()
        for individual in individuals:
            if self.status.get(individual) is NodeStatus.UNVISITED:
                found = self.visit(individual)
                self.output.update(found)
                derived |= found
        logger.info("Saturation pass derived %d axioms over %d individuals",
                    len(derived), len(self.status))
        return derived

    def visit(self, root: Individual) -> set[Axiom]:
        """Depth-first saturation from *root*.

        Returns every axiom derived for the nodes finished during this
        traversal, root included.
        """
        finished: set[Axiom] = set()
        stack = [self._enter(root)]
        while stack:
            frame = stack[-1]

            if frame.pending is not None:
                child, props = frame.pending
                frame.pending = None
                self._chain(frame.node, child, props)
                continue

            step = next(frame.edges, None)
            if step is None:
                stack.pop()
                self.status[frame.node] = NodeStatus.DONE
                finished |= self.results[frame.node]
                logger.debug("Done %s (%d axioms)", frame.node,
                             len(self.results[frame.node]))
                continue

            target, props = step
            self.results[frame.node] |= self._object_class_axioms(frame.node, target, props)

            status = self.status[target]
            if status is NodeStatus.UNVISITED:
                frame.pending = (target, props)
                stack.append(self._enter(target))
            else:
                if status is NodeStatus.EXPLORING:
                    logger.debug("Back-edge %s -> %s uses partial result", frame.node, target)
                self._chain(frame.node, target, props)

        return finished

    # ── steps ────────────────────────────────────────────────

    def _enter(self, node: Individual) -> _Frame:
        self.status[node] = NodeStatus.EXPLORING
        self.results[node] = set()
        logger.debug("Exploring %s", node)
        return _Frame(node, iter(list(self.graph.successors(node).items())))

    def _object_class_axioms(self, subject: Individual, target: Individual,
                             props: set[Property]) -> set[Axiom]:
        fillers = self.output.atomic_types(target) or [THING]
        axioms: set[Axiom] = set()
        for filler in fillers:
            for prop in sorted(props):
                axioms |= self.strategy.derive(subject, prop, filler)
        return axioms

    def _chain(self, subject: Individual, target: Individual,
               props: set[Property]) -> None:
        # snapshot: for a self loop, subject's own set is the one being read
        consumed = list(self.results[target])
        axioms: set[Axiom] = set()
        for axiom in consumed:
            if isinstance(axiom, ClassAssertion) and axiom.individual == target:
                for prop in sorted(props):
                    axioms |= self.strategy.chain(subject, prop, axiom.class_expression)
        self.results[subject] |= axioms


def saturate(ontology: Ontology,
             mode: SaturationMode | str = SaturationMode.ASSERTIONAL) -> Ontology:
    """Return a saturated copy of *ontology*; the input is left untouched."""
    output = ontology.copy()
    graph = build_graph(ontology)
    logger.info("Relation graph: %d individuals, %d edges", len(graph), graph.edge_count())
    engine = SaturationEngine(graph, output, strategy_for(mode))
    engine.run(ontology.individuals())
    return output
