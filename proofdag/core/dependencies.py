"""
Derived views over the graph: merged dependency ledgers and theory lemmas.
"""

from .boundary import proof_root
from .state import ClusterKind, Dependency


def group_pi_node_dependencies(nodes: dict, hidden: list) -> list:
    """
    Merge the dependency ledgers carried by the hidden nodes, by pi_id.

    The first entry for a pi_id is taken as-is (copied); later entries for
    the same pi_id append their deps_id. Nodes are scanned in table order.
    The result is the ledger of a new, coarser pi-node.
    """
    hidden_set = set(hidden)
    merged = []
    index = {}
    for node in nodes.values():
        if node.id not in hidden_set or not node.dependencies:
            continue
        for dep in node.dependencies:
            if dep.pi_id not in index:
                index[dep.pi_id] = len(merged)
                merged.append(Dependency(dep.pi_id, list(dep.deps_id)))
            else:
                merged[index[dep.pi_id]].deps_id.extend(dep.deps_id)
    return merged


def extract_theory_lemmas(nodes: dict, clusters: list, have_clusters: bool) -> list:
    """
    Conclusions of the theory lemmas of the proof.

    With cluster metadata: the root's conclusion followed by the conclusion
    of the first member of every TL cluster. Without it: the conclusion of
    every SCOPE step, since only the DOT format tags theory lemmas.
    """
    if have_clusters:
        root = proof_root(nodes)
        lemmas = [nodes[root].conclusion] if root is not None else []
        for cluster in clusters:
            if cluster.cluster_type == ClusterKind.TL and cluster.hidden_nodes:
                first = nodes.get(cluster.hidden_nodes[0])
                if first is not None:
                    lemmas.append(first.conclusion)
        return lemmas
    return [n.conclusion for n in nodes.values() if n.rule == "SCOPE"]
