import argparse
import json
import logging
import sys
from typing import List, Optional

from graphweave.config.logging import setup_logging
from graphweave.config.settings import GraphConfig, QualityGate
from graphweave.graph.errors import GraphIntegrityError
from graphweave.metrics.aggregation import export_csv
from graphweave.pipeline.engine import GraphEngine


# ==========================================
# CLI ARGUMENTS
# ==========================================


def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="graphweave",
        description="Build a clustered, laid-out knowledge graph from free text.",
    )

    p.add_argument(
        "--input",
        default=None,
        help="Text file to read (UTF-8). Reads stdin when omitted.",
    )
    p.add_argument(
        "--output",
        default=None,
        help="Write the JSON export here instead of stdout.",
    )
    p.add_argument("--iterations", type=int, default=None, help="Layout iterations.")
    p.add_argument(
        "--damping",
        type=float,
        default=None,
        help="Force-to-displacement scaling, in (0, 1].",
    )
    p.add_argument(
        "--cluster-threshold",
        type=int,
        default=None,
        help="Node count above which the view is clustered.",
    )
    p.add_argument("--min-weight", type=float, default=None, help="Quality gate weight.")
    p.add_argument(
        "--min-confidence", type=float, default=None, help="Quality gate confidence."
    )
    p.add_argument("--seed", type=int, default=None, help="Layout seed.")
    p.add_argument(
        "--root",
        default=None,
        metavar="LABEL",
        help="Seed the layout in rings around this entity.",
    )
    p.add_argument(
        "--expand",
        action="append",
        default=[],
        metavar="ID",
        help="Cluster or node id to expand (repeatable).",
    )
    p.add_argument("--plot", default=None, metavar="PNG", help="Save a 3D plot.")
    p.add_argument(
        "--export-csv",
        default=None,
        metavar="DIR",
        help="Write nodes.csv and edges.csv to this directory.",
    )
    p.add_argument("--debug", action="store_true", help="Verbose logging.")

    return p.parse_args(argv)


def build_config(args: argparse.Namespace) -> GraphConfig:
    config = GraphConfig().with_overrides(
        iterations=args.iterations,
        damping=args.damping,
        cluster_threshold=args.cluster_threshold,
        seed=args.seed,
    )
    if args.min_weight is not None or args.min_confidence is not None:
        gate = config.quality_gate
        config = config.with_overrides(
            quality_gate=QualityGate(
                min_weight=gate.min_weight if args.min_weight is None else args.min_weight,
                min_confidence=(
                    gate.min_confidence
                    if args.min_confidence is None
                    else args.min_confidence
                ),
            )
        )
    return config


def _read_text(path: Optional[str]) -> str:
    if path is None:
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


# ==========================================
# MAIN
# ==========================================


def main(argv: List[str]) -> int:
    args = parse_args(argv)
    setup_logging(args.debug)

    try:
        config = build_config(args)
        text = _read_text(args.input)
        with GraphEngine(config) as engine:
            report = engine.load_text(text, root_label=args.root)
            for item_id in args.expand:
                engine.toggle_expand(item_id)

            payload = engine.export()
            payload["report"] = report.to_dict()

            if args.export_csv:
                export_csv(engine.graph, engine.positions, args.export_csv)
            if args.plot:
                from graphweave.viz.graph_plots import plot_snapshot

                plot_snapshot(engine.snapshot(), args.plot)
    except (GraphIntegrityError, ValueError, OSError) as e:
        logging.debug("Run failed", exc_info=True)
        print(f"graphweave: error: {e}", file=sys.stderr)
        return 1

    rendered = json.dumps(payload, ensure_ascii=False, indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(rendered + "\n")
        logging.info(f"Wrote export to {args.output}")
    else:
        print(rendered)
    return 0


def run() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
