"""
CLI entry point. Run as: python -m proofdag <certificate> [options]
"""

import argparse
import re
import sys

from .core.state import ProofState
from .core.engine import (
    fold_nodes, hide_nodes, unfold_node, fold_all_descendants, select_nodes,
)
from .parsers import PARSERS, guess_format, load_proof
from .selection import select_by_rule, select_by_regex, select_by_ids, parse_id_list
from .views import VIEWS, apply_view, theory_lemmas
from .visualization import (
    print_graph, print_history, print_clusters, print_let_map,
    print_theory_lemmas, export_dot,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Proof certificate DAG explorer")
    parser.add_argument("certificate", nargs="?", default=None,
                        help="Alethe or DOT certificate to read")
    parser.add_argument("--format", choices=list(PARSERS.keys()), default=None,
                        help="Certificate format (default: guessed from the file)")
    parser.add_argument("--load", type=str, default=None,
                        help="Load a saved session instead of a certificate")
    parser.add_argument("--view", choices=VIEWS, default=None, help="View to apply")
    parser.add_argument("--fold", type=str, action="append", default=[],
                        help="Fold ids, e.g. '[2, 3]' or '[4-9]' (repeatable)")
    parser.add_argument("--fold-descendants", type=int, action="append", default=[],
                        help="Fold every node below this id (repeatable)")
    parser.add_argument("--unfold", type=int, action="append", default=[],
                        help="Unfold this pi-node (repeatable)")
    parser.add_argument("--hide", type=str, action="append", default=[],
                        help="Fold ids as one pi-node per linked group, e.g. '[4-9]'")
    parser.add_argument("--hide-selected", action="store_true",
                        help="After selecting, fold the selection per linked group")
    parser.add_argument("--select-rule", type=str, default=None, help="Select by rule name")
    parser.add_argument("--select-regex", type=str, default=None,
                        help="Select by a regex over conclusions")
    parser.add_argument("--select-ids", type=str, default=None,
                        help="Select ids, e.g. '[1, 5]' or '[3-8]'")
    parser.add_argument("--lemmas", action="store_true", help="Print theory lemmas")
    parser.add_argument("--let-map", action="store_true", help="Print the let map")
    parser.add_argument("--dot", type=str, default=None, help="Export DOT graph to file")
    parser.add_argument("--save", type=str, default=None, help="Save session to file")
    parser.add_argument("--quiet", action="store_true", help="Less output")
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    verbose = not args.quiet

    # --- Load or parse initial state ---
    if args.load:
        state = ProofState.load(args.load)
        print(f"Loaded session from {args.load} ({len(state.nodes)} nodes)")
    elif args.certificate:
        with open(args.certificate) as f:
            text = f.read()
        fmt = args.format or guess_format(args.certificate, text)
        state = load_proof(text, fmt)
        print(f"Format: {fmt} | Nodes: {len(state.nodes)}")
    else:
        print("Nothing to do: give a certificate or --load a session.")
        return 2

    # --- Commands, in a fixed order ---
    if args.view:
        apply_view(state, args.view, verbose=verbose)
    for ids in args.fold:
        fold_nodes(state, parse_id_list(ids), verbose=verbose)
    for ids in args.hide:
        hide_nodes(state, parse_id_list(ids), verbose=verbose)
    for node_id in args.fold_descendants:
        fold_all_descendants(state, node_id, verbose=verbose)
    for pi_id in args.unfold:
        unfold_node(state, pi_id, verbose=verbose)

    if args.select_rule:
        select_nodes(state, select_by_rule(state.nodes, args.select_rule), verbose=verbose)
    if args.select_regex:
        try:
            chosen = select_by_regex(state.nodes, args.select_regex)
        except re.error as err:
            print(f"Invalid regular expression {args.select_regex!r}: {err}")
        else:
            select_nodes(state, chosen, verbose=verbose)
    if args.select_ids:
        chosen = select_by_ids(state.nodes, parse_id_list(args.select_ids))
        select_nodes(state, chosen, verbose=verbose)

    if args.hide_selected:
        hide_nodes(state, verbose=verbose)

    # --- Reports ---
    if verbose:
        print_graph(state)
        print_history(state)
        if state.view == "clustered":
            print_clusters(state)
    if args.let_map:
        print_let_map(state)
    if args.lemmas:
        print_theory_lemmas(theory_lemmas(state))

    if args.dot:
        export_dot(state, args.dot)

    if args.save:
        state.save(args.save)
        print(f"Session saved to {args.save}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
