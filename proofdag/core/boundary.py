"""
Fold boundary computation and reachability over the node table.

When a set of nodes is collapsed into a pi-node, the pi-node must expose
exactly the edges that cross the boundary of that set:

    pi_node_parents   -- visible steps citing something inside the set
    pi_node_children  -- premises cited from inside the set

`nodes` is always a mapping id -> ProofNode. Ids that are not in the
mapping are ignored rather than raising.
"""

from typing import Optional
from .state import Dependency


def pi_node_parents(nodes: dict, hidden: list):
    """
    Boundary parents of a hidden set, plus the raw dependency ledger.

    Returns (parents, dependencies):
        parents       -- every p not in `hidden` with p in parents(h) for
                         some hidden h, in first-seen order, no repeats
        dependencies  -- [Dependency(pi_id=p, deps_id=[h, ...]), ...], one
                         entry per external parent, listing the hidden
                         nodes that parent cites
    """
    hidden_set = set(hidden)
    parents = []
    dependencies = []
    ledger = {}

    for hidden_id in hidden:
        node = nodes.get(hidden_id)
        if node is None:
            continue
        for parent in node.parents:
            # Internal edge, nothing to expose
            if parent in hidden_set:
                continue
            if parent not in parents:
                parents.append(parent)
            if parent in ledger:
                if hidden_id not in ledger[parent].deps_id:
                    ledger[parent].deps_id.append(hidden_id)
            else:
                ledger[parent] = Dependency(parent, [hidden_id])
                dependencies.append(ledger[parent])

    return [p for p in parents if p not in hidden_set], dependencies


def pi_node_children(nodes: dict, hidden: list) -> list:
    """Children of the hidden set that lie outside it, first-seen order, no repeats."""
    hidden_set = set(hidden)
    children = []
    for hidden_id in hidden:
        node = nodes.get(hidden_id)
        if node is None:
            continue
        for child in node.children:
            if child not in hidden_set and child not in children:
                children.append(child)
    return children


def closes_cycle(nodes: dict, parents: list, children: list) -> bool:
    """
    Would a pi-node with these boundary edges sit on a cycle?

    True when some boundary child reaches a boundary parent through
    children, i.e. a path leaves the hidden set and comes back into it.
    """
    targets = set(parents)
    if not targets:
        return False
    seen = set()
    stack = list(children)
    while stack:
        current = stack.pop()
        if current in targets:
            return True
        if current in seen or current not in nodes:
            continue
        seen.add(current)
        stack.extend(nodes[current].children)
    return False


def descendants(nodes: dict, node_id: int) -> list:
    """
    Every path-reachable node below node_id, skipping hidden ones.

    The result is not deduplicated: a node reached along two paths appears
    twice. Order matches the recursive definition

        descendants(n) = visible_children(n) + descendants(c1) + descendants(c2) + ...
    """
    node = nodes.get(node_id)
    if node is None:
        return []

    def visible_children(n):
        return [c for c in n.children if c in nodes and not nodes[c].is_hidden]

    result = visible_children(node)
    stack = list(reversed(result))
    while stack:
        current = nodes[stack.pop()]
        kids = visible_children(current)
        result.extend(kids)
        stack.extend(reversed(kids))
    return result


def reachable(nodes: dict, node_id: int) -> set:
    """Distinct ids reachable from node_id via children (node_id excluded)."""
    seen = set()
    node = nodes.get(node_id)
    if node is None:
        return seen
    stack = list(node.children)
    while stack:
        current = stack.pop()
        if current in seen or current not in nodes:
            continue
        seen.add(current)
        stack.extend(nodes[current].children)
    seen.discard(node_id)
    return seen


def count_descendants(nodes: dict) -> dict:
    """
    id -> size of the sub-proof below it, for every node.

    Memoised post-order walk; each node's reach set is built once from its
    children's.
    """
    reach = {}
    in_progress = set()
    for root in nodes:
        if root in reach:
            continue
        stack = [(root, False)]
        while stack:
            node_id, expanded = stack.pop()
            if node_id in reach:
                continue
            children = [c for c in nodes[node_id].children if c in nodes]
            if expanded:
                acc = set()
                for c in children:
                    acc.add(c)
                    acc |= reach.get(c, set())
                acc.discard(node_id)
                reach[node_id] = acc
                in_progress.discard(node_id)
                continue
            if node_id in in_progress:
                # malformed input with a cycle
                continue
            in_progress.add(node_id)
            stack.append((node_id, True))
            for c in children:
                if c not in reach and c not in in_progress:
                    stack.append((c, False))
    return {node_id: len(ids) for node_id, ids in reach.items()}


def proof_root(nodes: dict) -> Optional[int]:
    """
    The conclusion of the proof: the visible parentless node with the
    largest sub-proof. Ties go to the lowest id.
    """
    candidates = [n for n in nodes.values()
                  if not n.is_hidden and not n.pending and not n.parents]
    if not candidates:
        return None
    best = max(candidates, key=lambda n: (n.descendants, -n.id))
    return best.id
