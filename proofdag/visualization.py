"""
Visualization and reporting utilities.
"""

from .core.state import ProofState
from .core.scanner import escape_label


def print_graph(state: ProofState):
    """Print the visible nodes of the proof."""
    visible = state.visible_nodes
    print(f"\n{'='*60}")
    print(f"View: {state.view} | Visible nodes: {len(visible)} of {len(state.nodes)}")
    print(f"{'='*60}")
    for node in visible:
        mark = "*" if node.id in state.selected else " "
        kind = f"pi[{len(node.hidden_nodes)}]" if node.is_pi_node else node.rule
        src = f"  [from: {', '.join(str(c) for c in node.children)}]" if node.children else ""
        print(f" {mark}{node.id:>5}  {kind:<14} {node.conclusion}{src}")
    print(f"{'='*60}")


def print_history(state: ProofState):
    """Print the command history."""
    print(f"\n{'='*60}")
    print("Command history:")
    print(f"{'='*60}")
    for entry in state.history:
        details = ", ".join(f"{k}={v}" for k, v in entry.items()
                            if k not in ("command", "seq"))
        print(f"  {entry['seq']}: {entry['command']} {details}")


def print_clusters(state: ProofState):
    if not state.clusters:
        print("\nNo clusters (apply the clustered view first).")
        return
    print(f"\n{'='*60}")
    print("Clusters:")
    for i, cluster in enumerate(state.clusters):
        color = f" ({cluster.color})" if cluster.color else ""
        print(f"  {i}. {cluster.cluster_type.value}{color}: {cluster.hidden_nodes}")
    print(f"{'='*60}")


def print_let_map(state: ProofState):
    if not state.let_map:
        print("\nNo let bindings.")
        return
    print(f"\n{'='*60}")
    print("Let map:")
    for name, term in state.let_map.items():
        print(f"  {name} = {term}")
    print(f"{'='*60}")


def print_theory_lemmas(lemmas: list):
    print(f"\n{'='*60}")
    print(f"Theory lemmas ({len(lemmas)}):")
    for i, lemma in enumerate(lemmas):
        print(f"  {i+1}. {lemma}")
    print(f"{'='*60}")


def dot_source(state: ProofState) -> str:
    """The visible graph in the DOT dialect process_dot reads."""
    lines = ["digraph proof {", "\trankdir=BT;", "\tnode [shape=record];"]
    visible = state.visible_nodes
    for node in visible:
        rule = node.rule + (f" :args {node.args}" if node.args else "")
        label = f"{{{escape_label(node.conclusion)}|{escape_label(rule)}}}"
        comment = '{\\"subProofQty\\":%d}' % node.descendants
        lines.append(f'\t{node.id} [label="{label}", comment="{comment}"];')
    for node in visible:
        for child in node.children:
            lines.append(f"\t{child} -> {node.id};")
    by_kind = {}
    for node in visible:
        if node.cluster_type in state.cluster_colors:
            by_kind.setdefault(node.cluster_type, []).append(node.id)
    for kind, ids in by_kind.items():
        members = " ".join(str(i) for i in ids)
        lines.append(f'\tsubgraph cluster_{kind.value} {{ label="{kind.value}" '
                     f'bgcolor="{state.cluster_colors[kind]}" {members} }}')
    lines.append("}")
    return "\n".join(lines) + "\n"


def export_dot(state: ProofState, path="proof_graph.dot"):
    """Export the visible proof graph as a DOT file for Graphviz."""
    with open(path, "w") as f:
        f.write(dot_source(state))
    print(f"Graph exported to {path}")
