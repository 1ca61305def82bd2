"""
Cluster engine: partition nodes into groups for a simplified display.

    find_nodes_clusters  -- group a hidden set by shared parents, then merge
                            groups transitively until nothing changes
    slice_nodes_cluster  -- partition the whole DAG by provenance phase with
                            one depth-first walk from the proof root
"""

from typing import Optional
from .boundary import proof_root

MAX_MERGE_ITERATIONS = 1000


def _partition(clusters: list) -> frozenset:
    return frozenset(frozenset(c) for c in clusters)


def find_nodes_clusters(nodes: dict, hidden: list) -> list:
    """
    Groups of hidden nodes linked through shared or cited parents.

    First pass: each still-unplaced node with parents opens a group and
    pulls in every unplaced node whose parent set intersects its own. A
    node is used up after its first match. Nodes with no parents are never
    clustered.

    Second pass: while the partition keeps changing, a group B whose
    members intersect the parents of group A's first member is merged into
    A. Only groups of two or more nodes are returned.
    """
    hidden = [h for h in hidden if h in nodes]
    parents = [set(nodes[h].parents) for h in hidden]
    clusters = []
    clustered = 0

    for i in range(len(parents)):
        if clustered == len(parents) or not parents[i]:
            continue
        current = parents[i]
        cluster = []
        for j, other in enumerate(parents):
            if other and current & other:
                cluster.append(hidden[j])
                parents[j] = set()
                clustered += 1
        clusters.append(cluster)

    previous = None
    iterations = 0
    while _partition(clusters) != previous and iterations < MAX_MERGE_ITERATIONS:
        previous = _partition(clusters)
        iterations += 1
        i = 0
        while i < len(clusters):
            first_parents = set(nodes[clusters[i][0]].parents)
            merged = False
            for j in range(len(clusters)):
                if j != i and first_parents.intersection(clusters[j]):
                    clusters[i].extend(clusters[j])
                    del clusters[j]
                    if j < i:
                        i -= 1
                    merged = True
                    break
            # Re-examine the grown cluster before moving on
            if not merged:
                i += 1

    return [c for c in clusters if len(c) > 1]


def slice_nodes_cluster(
    nodes: dict,
    cluster_map: dict,
    start_id: Optional[int] = None,
    sliced: Optional[list] = None,
) -> list:
    """
    Partition the DAG below start_id (default: the proof root) by cluster_type.

    cluster_map maps node id -> cluster slot, -1 (or absent) meaning not yet
    assigned; it is filled in place. On first visit a node joins the slot of
    its first already-assigned parent of the same cluster_type. Failing
    that it opens a new slot and pulls in every unassigned sibling (child
    of its first parent) of the same type. The walk then continues into all
    children. Returns the list of slots, each a list of node ids.
    """
    if sliced is None:
        sliced = []
    if start_id is None:
        start_id = proof_root(nodes)
    if start_id is None or start_id not in nodes:
        return sliced

    walked = set()
    stack = [start_id]
    while stack:
        node_id = stack.pop()
        if node_id in walked or node_id not in nodes:
            continue
        walked.add(node_id)
        node = nodes[node_id]

        if cluster_map.get(node_id, -1) == -1:
            target = -1
            for p in node.parents:
                parent = nodes.get(p)
                if parent is None or parent.is_hidden:
                    continue
                if parent.cluster_type == node.cluster_type and cluster_map.get(p, -1) != -1:
                    target = cluster_map[p]
                    break

            if target != -1:
                sliced[target].append(node_id)
                cluster_map[node_id] = target
            else:
                slot = len(sliced)
                cluster_map[node_id] = slot
                sliced.append([node_id])
                first_parent = nodes.get(node.parents[0]) if node.parents else None
                if first_parent is not None:
                    for sibling in first_parent.children:
                        if (sibling != node_id and sibling in nodes
                                and cluster_map.get(sibling, -1) == -1
                                and nodes[sibling].cluster_type == node.cluster_type):
                            sliced[slot].append(sibling)
                            cluster_map[sibling] = slot

        stack.extend(reversed([c for c in node.children
                               if c in nodes and not nodes[c].is_hidden]))
    return sliced
