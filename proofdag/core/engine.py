"""
Commands over a ProofState: fold, hide, unfold, select.

Every command mutates the state it is given, logs an entry to
state.history, and prints progress when verbose. A command that cannot
apply cleanly (unknown id, hidden target, fewer than two nodes to fold, a
fold that would close a cycle) is a no-op: nothing is mutated and None is
returned.

Visibility invariant kept by fold/unfold: the children and parents lists
of visible nodes only name visible nodes. Hidden nodes keep the lists they
had when they were folded; `representative` maps those stale ids to the
node currently standing in for them.
"""

from typing import Optional
from .state import ProofState, ProofNode, Dependency
from .boundary import (
    pi_node_parents, pi_node_children, closes_cycle, descendants, reachable,
)
from .clusters import find_nodes_clusters
from .dependencies import group_pi_node_dependencies

PI_RULE = "π"


def representative(nodes: dict, node_id: int) -> int:
    """The visible node standing in for node_id (itself, or its enclosing pi-node)."""
    seen = set()
    while node_id in nodes and nodes[node_id].is_hidden:
        folded_into = nodes[node_id].folded_into
        if folded_into is None or folded_into in seen:
            break
        seen.add(node_id)
        node_id = folded_into
    return node_id


def _replace(ids: list, old: set, new: list) -> list:
    """Substitute every id in `old` by the ids of `new`, keeping first positions."""
    result = []
    for i in ids:
        if i in old:
            for n in new:
                if n not in result:
                    result.append(n)
        elif i not in result or i not in new:
            result.append(i)
    return result


def _remap(nodes: dict, ids: list) -> list:
    result = []
    for i in ids:
        rep = representative(nodes, i)
        if rep == i or rep not in result:
            result.append(rep)
    return result


def log_command(state: ProofState, entry: dict):
    entry["seq"] = len(state.history) + 1
    state.history.append(entry)


def fold_nodes(state: ProofState, node_ids: list, verbose: bool = True) -> Optional[ProofNode]:
    """
    Collapse a set of visible nodes into a new pi-node.

    The pi-node exposes the boundary parents and children of the set; the
    external parents get a Dependency(pi, [their hidden premises]); the
    pi-node carries the merged ledgers of the nodes it swallows.

    Returns the pi-node, or None when fewer than two distinct visible nodes
    were named, or when a path leaves the set and re-enters it (the pi-node
    would then sit on a cycle).
    """
    nodes = state.nodes
    hidden = []
    for node_id in node_ids:
        node = nodes.get(node_id)
        if node is not None and not node.is_hidden and node_id not in hidden:
            hidden.append(node_id)

    if len(hidden) < 2 or len(hidden) != len(node_ids):
        if verbose:
            print(f"  [no-op] fold {list(node_ids)}: need 2+ distinct visible nodes")
        return None

    parents, ledger = pi_node_parents(nodes, hidden)
    children = pi_node_children(nodes, hidden)
    if closes_cycle(nodes, parents, children):
        if verbose:
            print(f"  [no-op] fold {hidden}: a path leaves the set and comes back")
        return None

    pi_id = state.next_id
    state.next_id += 1
    hidden_set = set(hidden)

    # Conclusions of the members nothing else inside the set cites
    tops = [nodes[h] for h in hidden
            if not any(p in hidden_set for p in nodes[h].parents)]
    pi = ProofNode(
        id=pi_id,
        conclusion=" ; ".join(n.conclusion for n in tops if n.conclusion),
        rule=PI_RULE,
        children=children,
        parents=parents,
        hidden_nodes=[nodes[h] for h in hidden],
        dependencies=group_pi_node_dependencies(nodes, hidden),
    )
    nodes[pi_id] = pi

    for entry in ledger:
        parent = nodes[entry.pi_id]
        parent.children = _replace(parent.children, hidden_set, [pi_id])
        parent.dependencies.append(Dependency(pi_id, list(entry.deps_id)))
    for child_id in children:
        child = nodes[child_id]
        child.parents = _replace(child.parents, hidden_set, [pi_id])
    for h in hidden:
        nodes[h].is_hidden = True
        nodes[h].folded_into = pi_id
    pi.descendants = len(hidden) + len(reachable(nodes, pi_id))

    state.selected -= hidden_set
    log_command(state, {"command": "fold", "pi": pi_id, "hidden": list(hidden),
                        "parents": list(parents), "children": list(children)})
    if verbose:
        print(f"  [fold] {hidden} -> pi-node {pi_id} "
              f"(parents {parents}, children {children})")
    return pi


def unfold_node(state: ProofState, pi_id: int, verbose: bool = True) -> Optional[list]:
    """
    Restore the members of a visible pi-node and remove the pi-node.

    Members' edges are remapped to the nodes currently visible for them,
    every reference to the pi-node is replaced by the members it stood for,
    and dependency entries naming the pi-node are dropped everywhere.

    Returns the restored ids, or None when pi_id is not a visible pi-node.
    """
    nodes = state.nodes
    pi = nodes.get(pi_id)
    if pi is None or not pi.is_pi_node or pi.is_hidden:
        if verbose:
            print(f"  [no-op] unfold {pi_id}: not a visible pi-node")
        return None

    members = pi.hidden_nodes
    member_ids = [m.id for m in members]
    raw = {m.id: (list(m.children), list(m.parents)) for m in members}

    for m in members:
        m.is_hidden = False
        m.folded_into = None
    for m in members:
        m.children = _remap(nodes, m.children)
        m.parents = _remap(nodes, m.parents)

    for node in nodes.values():
        if node.id == pi_id:
            continue
        if pi_id in node.children:
            cited = [i for i in member_ids
                     if node.id in raw[i][1] or node.id in nodes[i].parents]
            node.children = _replace(node.children, {pi_id}, cited)
        if pi_id in node.parents:
            citing = [i for i in member_ids
                      if node.id in raw[i][0] or node.id in nodes[i].children]
            node.parents = _replace(node.parents, {pi_id}, citing)
        if node.folded_into == pi_id:
            node.folded_into = None
        node.dependencies = [d for d in node.dependencies if d.pi_id != pi_id]

    del nodes[pi_id]
    log_command(state, {"command": "unfold", "pi": pi_id, "restored": member_ids})
    if verbose:
        print(f"  [unfold] pi-node {pi_id} -> {member_ids}")
    return member_ids


def fold_all_descendants(state: ProofState, node_id: int, verbose: bool = True) -> Optional[ProofNode]:
    """Fold every visible node below node_id into one pi-node."""
    below = []
    for d in descendants(state.nodes, node_id):
        if d not in below:
            below.append(d)
    return fold_nodes(state, below, verbose=verbose)


def hide_nodes(state: ProofState, node_ids: Optional[list] = None,
               verbose: bool = True) -> list:
    """
    Fold a selection as one pi-node per linked group.

    The ids (the current selection when node_ids is None) are split with
    find_nodes_clusters into groups linked through shared or cited parents,
    and each group is folded on its own. Nodes with no parents and groups
    of one stay visible. Returns the pi-nodes created.
    """
    if node_ids is None:
        node_ids = sorted(state.selected)
    visible = []
    for node_id in node_ids:
        node = state.nodes.get(node_id)
        if node is not None and not node.is_hidden and node_id not in visible:
            visible.append(node_id)

    created = []
    for group in find_nodes_clusters(state.nodes, visible):
        pi = fold_nodes(state, group, verbose=verbose)
        if pi is not None:
            created.append(pi)
    if verbose:
        print(f"  [hide] {len(created)} pi-node(s) from {len(visible)} node(s)")
    return created


def unfold_all(state: ProofState, verbose: bool = True) -> list:
    """Unfold visible pi-nodes until none remain. Returns the unfolded pi ids."""
    unfolded = []
    while state.pi_nodes:
        pi_id = state.pi_nodes[-1].id
        unfold_node(state, pi_id, verbose=verbose)
        unfolded.append(pi_id)
    return unfolded


def select_nodes(state: ProofState, node_ids: list, verbose: bool = True) -> set:
    """Add the visible ids among node_ids to the selection."""
    chosen = {i for i in node_ids if i in state.nodes and not state.nodes[i].is_hidden}
    state.selected |= chosen
    log_command(state, {"command": "select", "ids": sorted(chosen)})
    if verbose:
        print(f"  [select] {len(chosen)} node(s), {len(state.selected)} selected")
    return state.selected


def unselect_nodes(state: ProofState, node_ids: Optional[list] = None,
                   verbose: bool = True) -> set:
    """Drop node_ids from the selection; everything when node_ids is None."""
    if node_ids is None:
        state.selected.clear()
    else:
        state.selected -= set(node_ids)
    log_command(state, {"command": "unselect",
                        "ids": None if node_ids is None else sorted(node_ids)})
    if verbose:
        print(f"  [unselect] {len(state.selected)} selected")
    return state.selected
