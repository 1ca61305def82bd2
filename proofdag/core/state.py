"""
Core data structures: ClusterKind, Dependency, ProofNode, NodeCluster, ProofState.

These are the atoms of the whole system. Nothing in here depends on a
certificate format or on the folding algorithms.

Nodes:
    A ProofNode is one inference step (or an assumption leaf).
    children  -> premises this step depends on (points toward assumptions)
    parents   -> steps citing this node as a premise (the inverse relation)

    A pi-node is a ProofNode whose hidden_nodes is non-empty: a folded
    region of the proof that exposes only its boundary edges.

State:
    ProofState owns the node table for one parsed certificate. Nodes are
    never deleted, only hidden; pi-nodes are added to the same table and
    removed again on unfold.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional
import json


class ClusterKind(Enum):
    """Provenance phase of a node, as tagged by DOT subgraph metadata."""
    NONE = "NONE"
    SAT = "SAT"
    CNF = "CNF"
    TL = "TL"
    PP = "PP"
    IN = "IN"

    @classmethod
    def from_label(cls, label: str) -> "ClusterKind":
        try:
            return cls(label.strip())
        except ValueError:
            return cls.NONE


@dataclass
class Dependency:
    """
    One entry of a dependency ledger.

    On a node: its premises deps_id were folded into pi-node pi_id.
    In the raw ledger returned by pi_node_parents, pi_id is the external
    parent and deps_id the hidden nodes it cites.
    """
    pi_id: int
    deps_id: list = field(default_factory=list)

    def to_dict(self):
        return {"piId": self.pi_id, "depsId": list(self.deps_id)}

    @classmethod
    def from_dict(cls, d):
        return cls(d["piId"], list(d.get("depsId", [])))


@dataclass
class ProofNode:
    """One proof step. Identity is the integer id."""
    id: int
    conclusion: str = ""
    rule: str = ""
    args: str = ""
    children: list = field(default_factory=list)
    parents: list = field(default_factory=list)
    descendants: int = 0
    is_hidden: bool = False
    hidden_nodes: Optional[list] = None
    dependencies: list = field(default_factory=list)
    cluster_type: ClusterKind = ClusterKind.NONE
    folded_into: Optional[int] = None
    pending: bool = False

    @property
    def is_pi_node(self):
        return bool(self.hidden_nodes)

    @property
    def hidden_ids(self):
        return [n.id for n in self.hidden_nodes or []]

    def __hash__(self):
        return hash(self.id)

    def __eq__(self, other):
        return isinstance(other, ProofNode) and self.id == other.id

    def __repr__(self):
        kind = "pi" if self.is_pi_node else self.rule or "?"
        return f"ProofNode({self.id}, {kind!r})"


@dataclass
class NodeCluster:
    """A group of nodes sharing provenance, as shown in the clustered view."""
    cluster_type: ClusterKind
    hidden_nodes: list = field(default_factory=list)
    color: str = ""


@dataclass
class ProofState:
    """
    Full state of one visualisation session, serializable for export.

    nodes:          id -> ProofNode, parsed nodes plus live pi-nodes
    let_map:        let-bound symbol -> bound term (immutable after parse)
    cluster_colors: ClusterKind -> display color (DOT only)
    clusters:       NodeCluster descriptors of the current clustered view
    selected:       ids selected by the user
    history:        log of the commands applied
    next_id:        id for the next pi-node; only ever increases
    """
    nodes: dict = field(default_factory=dict)
    let_map: dict = field(default_factory=dict)
    cluster_colors: dict = field(default_factory=dict)
    clusters: list = field(default_factory=list)
    selected: set = field(default_factory=set)
    view: str = "full"
    history: list = field(default_factory=list)
    next_id: int = 0

    @classmethod
    def from_parse(cls, nodes: dict, let_map: dict, cluster_colors: dict):
        next_id = max(nodes) + 1 if nodes else 0
        return cls(nodes=nodes, let_map=dict(let_map),
                   cluster_colors=dict(cluster_colors), next_id=next_id)

    def node(self, node_id) -> Optional[ProofNode]:
        return self.nodes.get(node_id)

    @property
    def visible_nodes(self):
        return [n for n in self.nodes.values() if not n.is_hidden]

    @property
    def pi_nodes(self):
        return [n for n in self.nodes.values() if n.is_pi_node and not n.is_hidden]

    @property
    def have_clusters(self):
        return bool(self.cluster_colors)

    def to_dict(self):
        def serialize(node):
            return {
                "id": node.id,
                "conclusion": node.conclusion,
                "rule": node.rule,
                "args": node.args,
                "children": list(node.children),
                "parents": list(node.parents),
                "descendants": node.descendants,
                "isHidden": node.is_hidden,
                "hiddenNodes": node.hidden_ids if node.hidden_nodes else None,
                "dependencies": [d.to_dict() for d in node.dependencies],
                "clusterType": node.cluster_type.value,
                "foldedInto": node.folded_into,
                "pending": node.pending,
            }

        return {
            "nodes": [serialize(n) for n in self.nodes.values()],
            "letMap": self.let_map,
            "clusterColors": {k.value: v for k, v in self.cluster_colors.items()},
            "clusters": [{"type": c.cluster_type.value,
                          "hiddenNodes": list(c.hidden_nodes),
                          "color": c.color} for c in self.clusters],
            "selected": sorted(self.selected),
            "view": self.view,
            "history": self.history,
            "nextId": self.next_id,
        }

    @classmethod
    def from_dict(cls, d):
        nodes = {}
        hidden_refs = {}
        for data in d["nodes"]:
            node = ProofNode(
                id=data["id"],
                conclusion=data.get("conclusion", ""),
                rule=data.get("rule", ""),
                args=data.get("args", ""),
                children=list(data.get("children", [])),
                parents=list(data.get("parents", [])),
                descendants=data.get("descendants", 0),
                is_hidden=data.get("isHidden", False),
                dependencies=[Dependency.from_dict(x) for x in data.get("dependencies", [])],
                cluster_type=ClusterKind.from_label(data.get("clusterType", "NONE")),
                folded_into=data.get("foldedInto"),
                pending=data.get("pending", False),
            )
            nodes[node.id] = node
            if data.get("hiddenNodes"):
                hidden_refs[node.id] = data["hiddenNodes"]
        # hidden_nodes hold the very objects kept in the table
        for pi_id, ids in hidden_refs.items():
            nodes[pi_id].hidden_nodes = [nodes[i] for i in ids if i in nodes]

        state = cls(nodes=nodes)
        state.let_map = d.get("letMap", {})
        state.cluster_colors = {ClusterKind.from_label(k): v
                                for k, v in d.get("clusterColors", {}).items()}
        state.clusters = [NodeCluster(ClusterKind.from_label(c["type"]),
                                      list(c["hiddenNodes"]), c.get("color", ""))
                          for c in d.get("clusters", [])]
        state.selected = set(d.get("selected", []))
        state.view = d.get("view", "full")
        state.history = d.get("history", [])
        state.next_id = d.get("nextId", max(nodes) + 1 if nodes else 0)
        return state

    def save(self, path="proof_state.json"):
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path="proof_state.json"):
        with open(path) as f:
            return cls.from_dict(json.load(f))
