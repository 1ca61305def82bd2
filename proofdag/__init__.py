"""
proofdag: explore machine-generated proof certificates as a DAG.

Reads Alethe and DOT proof certificates into one node graph, then lets
regions of it be folded into summary pi-nodes, unfolded again, sliced by
provenance phase, and searched by rule or conclusion.

Usage:
    python -m proofdag proof.alethe
    python -m proofdag proof.dot --view clustered --lemmas
    python -m proofdag proof.alethe --fold "[2, 3]" --save session.json
    python -m proofdag --load session.json --unfold 7 --dot out.dot
"""

from .core.state import ClusterKind, Dependency, ProofNode, NodeCluster, ProofState
from .core.boundary import pi_node_parents, pi_node_children, descendants, proof_root
from .core.clusters import find_nodes_clusters, slice_nodes_cluster
from .core.dependencies import group_pi_node_dependencies, extract_theory_lemmas
from .core.engine import (
    fold_nodes, hide_nodes, unfold_node, fold_all_descendants, unfold_all,
    select_nodes, unselect_nodes,
)
from .parsers import PARSERS, parse_certificate, load_proof, process_alethe, process_dot
from .selection import select_by_rule, select_by_regex, select_by_ids, parse_id_list
from .views import apply_view, build_node_clusters, theory_lemmas
from .visualization import export_dot, dot_source

__all__ = [
    "ClusterKind", "Dependency", "ProofNode", "NodeCluster", "ProofState",
    "pi_node_parents", "pi_node_children", "descendants", "proof_root",
    "find_nodes_clusters", "slice_nodes_cluster",
    "group_pi_node_dependencies", "extract_theory_lemmas",
    "fold_nodes", "hide_nodes", "unfold_node", "fold_all_descendants", "unfold_all",
    "select_nodes", "unselect_nodes",
    "PARSERS", "parse_certificate", "load_proof", "process_alethe", "process_dot",
    "select_by_rule", "select_by_regex", "select_by_ids", "parse_id_list",
    "apply_view", "build_node_clusters", "theory_lemmas",
    "export_dot", "dot_source",
]
