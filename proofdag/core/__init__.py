from .state import ClusterKind, Dependency, ProofNode, NodeCluster, ProofState
from .scanner import remove_escaped_characters, find_enclosed_text, split_statements
from .boundary import (
    pi_node_parents, pi_node_children, closes_cycle, descendants,
    reachable, count_descendants, proof_root,
)
from .clusters import find_nodes_clusters, slice_nodes_cluster
from .dependencies import group_pi_node_dependencies, extract_theory_lemmas
from .engine import (
    fold_nodes, hide_nodes, unfold_node, fold_all_descendants, unfold_all,
    select_nodes, unselect_nodes, representative,
)

__all__ = [
    "ClusterKind", "Dependency", "ProofNode", "NodeCluster", "ProofState",
    "remove_escaped_characters", "find_enclosed_text", "split_statements",
    "pi_node_parents", "pi_node_children", "closes_cycle", "descendants",
    "reachable", "count_descendants", "proof_root",
    "find_nodes_clusters", "slice_nodes_cluster",
    "group_pi_node_dependencies", "extract_theory_lemmas",
    "fold_nodes", "hide_nodes", "unfold_node", "fold_all_descendants", "unfold_all",
    "select_nodes", "unselect_nodes", "representative",
]
