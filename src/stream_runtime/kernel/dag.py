from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field


class DagError(ValueError):
    # Base error for topology graph construction and validation failures.
    pass


class MissingProviderError(DagError):
    # Raised when a consumed token (node output or store) has no provider.
    pass


@dataclass(frozen=True, slots=True)
class NodeContract:
    # Minimal contract used by the DAG builder: tokens are "node:<name>", "topic:<name>" or "store:<name>".
    name: str
    consumes: list[str] = field(default_factory=list)
    emits: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Dag:
    # DAG representation for analysis: nodes + directed edges.
    nodes: list[str]
    edges: list[tuple[str, str]]


def build_dag(contracts: Sequence[NodeContract]) -> Dag:
    # Edges run provider -> consumer, grouped per consumer in declaration order.
    providers: dict[str, list[str]] = {}
    names: set[str] = set()
    for contract in contracts:
        if not contract.consumes and not contract.emits:
            raise DagError(f"Node '{contract.name}' must declare consumes or emits")
        if contract.name in names:
            raise DagError(f"Duplicate node name '{contract.name}'")
        names.add(contract.name)
        for token in contract.emits:
            providers.setdefault(token, []).append(contract.name)

    edges: list[tuple[str, str]] = []
    for contract in contracts:
        for token in contract.consumes:
            # A join against a table built by another builder has no provider here.
            if token not in providers:
                raise MissingProviderError(f"Node '{contract.name}' consumes '{token}', which no node provides")
            for provider in providers[token]:
                edge = (provider, contract.name)
                if edge not in edges:
                    edges.append(edge)
    return Dag(nodes=[contract.name for contract in contracts], edges=edges)
