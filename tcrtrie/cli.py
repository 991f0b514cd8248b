"""Command line for approximate TCR sequence search."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Sequence

from .interface import SearchConfig, run_search
from .matrix import DEFAULT_DELETION_SCORE

__all__ = ["build_parser", "parse_config", "main"]


def build_parser() -> argparse.ArgumentParser:
    """The argument parser for the search command."""
    parser = argparse.ArgumentParser(
        prog="tcrtrie",
        description="Approximate TCR sequence search",
    )
    parser.add_argument("-t", "--trie", required=True,
                        help="Path to AIRR file with sequences")
    parser.add_argument("-o", "--output", default="",
                        help="Path to output folder")
    parser.add_argument("-q", "--query", default="",
                        help="Single query sequence")
    parser.add_argument("--v-gene", default=None, help="V-gene to match")
    parser.add_argument("--j-gene", default=None, help="J-gene to match")
    parser.add_argument("--input-queries", default="",
                        help="Path to AIRR file with batch query sequences")
    parser.add_argument("-s", "--sub", type=int, default=-1,
                        help="Allowable number of substitutions")
    parser.add_argument("-i", "--ins", type=int, default=-1,
                        help="Allowed number of inserts")
    parser.add_argument("-d", "--del", dest="deletions", type=int, default=-1,
                        help="Allowed number of deletions")
    parser.add_argument("-m", "--matrix-search", default="",
                        help="Path to substitution matrix file")
    parser.add_argument("-r", "--score-radius", type=float, default=None,
                        help="Score radius for matrix-based search")
    parser.add_argument("--deletion-score", type=float, default=None,
                        help="Cost for deletion for matrix-based search")
    return parser


def parse_config(argv: Sequence[str] | None = None) -> SearchConfig:
    """Parse and validate arguments; invalid combinations exit with status 2."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if (args.v_gene is not None or args.j_gene is not None) and not args.query:
        parser.error("--v-gene and --j-gene require --query")
    if not args.matrix_search and (
        args.score_radius is not None or args.deletion_score is not None
    ):
        parser.error("--score-radius and --deletion-score require --matrix-search")
    if not args.query and not args.input_queries:
        parser.error("No query received")
    if args.query and args.input_queries:
        parser.error("Only one of --query or --input-queries must be specified.")
    if args.matrix_search and (args.sub >= 0 or args.ins >= 0 or args.deletions >= 0):
        parser.error("Only one of Levenshtein or Score search must be specified.")
    cost_radius = -1.0 if args.score_radius is None else args.score_radius
    if args.matrix_search and cost_radius < 0:
        parser.error("--score-radius must be specified with --matrix-search.")

    return SearchConfig(
        input_path=args.trie,
        output_path=args.output or "./",
        query=args.query,
        input_queries=args.input_queries,
        max_substitution=args.sub,
        max_insertion=args.ins,
        max_deletion=args.deletions,
        matrix_path=args.matrix_search,
        cost_radius=cost_radius,
        deletion_score=(
            DEFAULT_DELETION_SCORE if args.deletion_score is None else args.deletion_score
        ),
        v_gene=args.v_gene or "",
        j_gene=args.j_gene or "",
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command; returns the process exit status."""
    config = parse_config(argv)
    started = time.perf_counter()
    try:
        out_path = run_search(config)
    except (OSError, ValueError, RuntimeError, KeyError) as error:
        print(f"Error during search: {error}", file=sys.stderr)
        return 1
    elapsed_ms = (time.perf_counter() - started) * 1000.0
    print(f"SearchAIRR complete. Results saved to: {out_path}")
    print(f"Execution time: {elapsed_ms}")
    return 0


if __name__ == "__main__":
    sys.exit(main())