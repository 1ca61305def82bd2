"""
Whole-proof views.

    full       -- every pi-node unfolded
    clustered  -- the DAG sliced by provenance phase, each multi-node phase
                  cluster folded into a pi-node tagged with that phase; a
                  slice whose fold would close a cycle stays unfolded
"""

from .core.state import ClusterKind, NodeCluster, ProofState
from .core.clusters import slice_nodes_cluster
from .core.dependencies import extract_theory_lemmas
from .core.engine import fold_nodes, unfold_all, log_command

VIEWS = ("full", "clustered")


def build_node_clusters(state: ProofState) -> list:
    """Phase slices of the visible DAG as NodeCluster descriptors."""
    slots = slice_nodes_cluster(state.nodes, {})
    clusters = []
    for members in slots:
        kind = state.nodes[members[0]].cluster_type
        clusters.append(NodeCluster(kind, list(members),
                                    state.cluster_colors.get(kind, "")))
    return clusters


def apply_view(state: ProofState, view: str, verbose: bool = True):
    """Switch the state to `view`. Unknown views are a no-op returning None."""
    if view not in VIEWS:
        if verbose:
            print(f"  [no-op] unknown view {view!r}; expected one of {VIEWS}")
        return None

    unfold_all(state, verbose=verbose)
    state.clusters = []
    if view == "clustered":
        clusters = build_node_clusters(state)
        for cluster in clusters:
            if cluster.cluster_type == ClusterKind.NONE or len(cluster.hidden_nodes) < 2:
                continue
            pi = fold_nodes(state, cluster.hidden_nodes, verbose=verbose)
            if pi is not None:
                pi.cluster_type = cluster.cluster_type
        state.clusters = clusters

    state.view = view
    log_command(state, {"command": "view", "view": view})
    return state


def theory_lemmas(state: ProofState) -> list:
    """Theory lemmas of the session, slicing clusters on demand."""
    clusters = state.clusters
    if state.have_clusters and not clusters:
        clusters = build_node_clusters(state)
    return extract_theory_lemmas(state.nodes, clusters, state.have_clusters)
