"""Relation graph: individuals connected by the properties asserted between them.

    graph = build_graph(ontology)
    for target, properties in graph.successors(alice).items():
        ...

Each ordered pair of individuals has at most one edge; every property
asserted between the pair is merged into that edge's property set.
"""

from __future__ import annotations

from typing import Iterator

from ontosat.model import Individual, Ontology, Property


class RelationGraph:
    """Adjacency map: individual -> {individual -> set of properties}."""

    def __init__(self):
        self._adjacency: dict[Individual, dict[Individual, set[Property]]] = {}

    def add_node(self, individual: Individual) -> None:
        self._adjacency.setdefault(individual, {})

    def add_edge(self, subject: Individual, prop: Property, obj: Individual) -> None:
        self.add_node(subject)
        self.add_node(obj)
        self._adjacency[subject].setdefault(obj, set()).add(prop)

    def nodes(self) -> list[Individual]:
        return list(self._adjacency)

    def successors(self, individual: Individual) -> dict[Individual, set[Property]]:
        return self._adjacency[individual]

    def edge(self, subject: Individual, obj: Individual) -> set[Property]:
        """Properties on the edge subject -> obj (empty if there is none)."""
        return self._adjacency.get(subject, {}).get(obj, set())

    def edges(self) -> Iterator[tuple[Individual, Individual, set[Property]]]:
        for subject, targets in self._adjacency.items():
            for obj, props in targets.items():
                yield subject, obj, props

    def edge_count(self) -> int:
        return sum(len(targets) for targets in self._adjacency.values())

    def __contains__(self, individual: object) -> bool:
        return individual in self._adjacency

    def __len__(self) -> int:
        return len(self._adjacency)


def build_graph(ontology: Ontology) -> RelationGraph:
    """Build the relation graph of *ontology*'s own property assertions.

    Every individual of the signature becomes a node, isolated ones
    included, so the saturation driver can visit all of them.
    """
    graph = RelationGraph()
    for individual in ontology.individuals():
        graph.add_node(individual)
    for assertion in ontology.property_assertions():
        graph.add_edge(assertion.subject, assertion.property, assertion.object)
    return graph
