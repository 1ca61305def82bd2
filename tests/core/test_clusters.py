"""
Property-based and unit tests for the cluster engine.

Core claims:
    - find_nodes_clusters never places a node in two clusters
    - every reported cluster has 2+ nodes, all from the hidden set
    - groups linked through cited parents merge transitively
    - slice_nodes_cluster assigns every reachable node exactly one slot,
      and every slot is uniform in cluster_type
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from proofdag.core.state import ProofNode, ClusterKind
from proofdag.core.clusters import find_nodes_clusters, slice_nodes_cluster
from proofdag.core.boundary import reachable


# ── Helpers ──────────────────────────────────────────────────────────────────

def make_nodes(children_of: dict, kinds: dict = None) -> dict:
    ids = set(children_of)
    for kids in children_of.values():
        ids |= set(kids)
    kinds = kinds or {}
    nodes = {i: ProofNode(id=i, cluster_type=kinds.get(i, ClusterKind.NONE))
             for i in sorted(ids)}
    for parent, kids in children_of.items():
        for kid in kids:
            nodes[parent].children.append(kid)
            nodes[kid].parents.append(parent)
    return nodes


@st.composite
def typed_dags(draw, max_nodes=10):
    """Random DAGs rooted at 0: every node i > 0 is cited by some lower id."""
    n = draw(st.integers(min_value=2, max_value=max_nodes))
    children_of = {i: [] for i in range(n)}
    for i in range(1, n):
        cited_by = draw(st.lists(st.integers(min_value=0, max_value=i - 1),
                                 min_size=1, max_size=2, unique=True))
        for p in cited_by:
            children_of[p].append(i)
    kinds = {i: draw(st.sampled_from([ClusterKind.SAT, ClusterKind.CNF, ClusterKind.TL]))
             for i in range(1, n)}
    return make_nodes(children_of, kinds)


# ── Unit tests: find_nodes_clusters ─────────────────────────────────────────

class TestFindNodesClusters:
    def test_shared_parent_groups(self):
        nodes = make_nodes({0: [1, 2], 1: [3, 4], 2: [5]})
        assert find_nodes_clusters(nodes, [3, 4, 5]) == [[3, 4]]

    def test_singletons_dropped(self):
        nodes = make_nodes({0: [1], 1: [2]})
        assert find_nodes_clusters(nodes, [2]) == []

    def test_parentless_nodes_not_clustered(self):
        nodes = make_nodes({0: [1, 2]})
        clusters = find_nodes_clusters(nodes, [0, 1, 2])
        assert clusters == [[1, 2]]

    def test_transitive_merge(self):
        nodes = make_nodes({0: [1, 2], 1: [3, 4], 2: [5]})
        clusters = find_nodes_clusters(nodes, [1, 3, 4, 2, 5])
        assert len(clusters) == 1
        assert sorted(clusters[0]) == [1, 2, 3, 4, 5]

    def test_disjoint_regions_stay_apart(self):
        nodes = make_nodes({0: [1, 2], 1: [3, 4], 2: [5, 6]})
        clusters = find_nodes_clusters(nodes, [3, 4, 5, 6])
        assert sorted(sorted(c) for c in clusters) == [[3, 4], [5, 6]]

    def test_unknown_ids_ignored(self):
        nodes = make_nodes({0: [1, 2]})
        assert find_nodes_clusters(nodes, [1, 2, 42]) == [[1, 2]]


# ── Unit tests: slice_nodes_cluster ─────────────────────────────────────────

class TestSliceNodesCluster:
    def test_phase_partition(self):
        sat, cnf = ClusterKind.SAT, ClusterKind.CNF
        nodes = make_nodes({0: [1, 2], 1: [3], 2: [4]},
                           {1: sat, 2: sat, 3: sat, 4: cnf})
        cluster_map = {}
        sliced = slice_nodes_cluster(nodes, cluster_map, start_id=0)
        assert sliced == [[0], [1, 2, 3], [4]]
        assert cluster_map == {0: 0, 1: 1, 2: 1, 3: 1, 4: 2}

    def test_default_start_is_root(self):
        nodes = make_nodes({0: [1], 1: [2]})
        for i, n in nodes.items():
            n.descendants = 2 - i
        assert slice_nodes_cluster(nodes, {}) == [[0, 1, 2]]

    def test_assigned_nodes_skipped(self):
        nodes = make_nodes({0: [1, 2]}, {1: ClusterKind.TL, 2: ClusterKind.TL})
        cluster_map = {0: -1, 1: -1, 2: -1}
        sliced = slice_nodes_cluster(nodes, cluster_map, start_id=0)
        assert sliced == [[0], [1, 2]]

    def test_unassigned_same_type_parent_not_joined(self):
        # 3 is reached through 1 before its SAT parent 2 has a slot
        tl, sat = ClusterKind.TL, ClusterKind.SAT
        nodes = make_nodes({0: [1, 2], 1: [3], 2: [3]}, {1: tl, 2: sat, 3: sat})
        sliced = slice_nodes_cluster(nodes, {}, start_id=0)
        assert sliced == [[0], [1], [3], [2]]

    def test_join_first_assigned_parent_of_same_type(self):
        sat = ClusterKind.SAT
        nodes = make_nodes({0: [1, 2], 1: [3], 2: [3]}, {1: sat, 2: sat, 3: sat})
        sliced = slice_nodes_cluster(nodes, {}, start_id=0)
        assert sliced == [[0], [1, 2, 3]]

    def test_missing_start(self):
        assert slice_nodes_cluster({}, {}) == []


# ── Property-based tests ─────────────────────────────────────────────────────

class TestClusterProperties:

    @given(typed_dags(), st.data())
    def test_find_clusters_is_partition_of_hidden(self, nodes, data):
        hidden = data.draw(st.lists(st.sampled_from(sorted(nodes)), unique=True))
        clusters = find_nodes_clusters(nodes, hidden)
        placed = [n for c in clusters for n in c]
        assert len(placed) == len(set(placed))
        assert set(placed) <= set(hidden)
        assert all(len(c) > 1 for c in clusters)

    @given(typed_dags())
    @settings(max_examples=50)
    def test_slice_assigns_each_node_once(self, nodes):
        cluster_map = {}
        sliced = slice_nodes_cluster(nodes, cluster_map, start_id=0)
        placed = [n for s in sliced for n in s]
        assert len(placed) == len(set(placed))
        assert set(placed) == {0} | reachable(nodes, 0)
        for slot, members in enumerate(sliced):
            assert len({nodes[m].cluster_type for m in members}) == 1
            for m in members:
                assert cluster_map[m] == slot
