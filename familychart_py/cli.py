"""Command line front end.

Commands:
    tree       compute the tree around a person and print its nodes
    delays     print the animation delay of every node of a tree
    validate   report integrity findings (exit status 1 when any)
    normalize  rewrite a dataset in the current relationship shape
    generate   write a synthetic dataset
"""
from __future__ import annotations
import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .animation import calculate_delay
from .config import Config, load_config
from .errors import NotFound
from .fs import json_save
from .generators import GENERATORS
from .hierarchy import calculate_tree
from .models import Tree
from .store import Store


def _node_label(node) -> str:
    data = node.data.data
    name = " ".join(str(data[k]) for k in ("first name", "last name") if data.get(k))
    return name or node.id


def _side(node) -> str:
    if node.main:
        return "main"
    if node.is_ancestry:
        return "ancestry"
    return "sibling" if node.sibling else "progeny"


def _load_store(data: str) -> Store:
    path = Path(data)
    if not path.is_file():
        raise FileNotFoundError(f"Dataset {data} not found")
    return Store.from_file(path)


def _build_tree(store: Store, args, cfg: Config) -> Tree:
    return calculate_tree(
        store,
        args.main_id,
        ancestry_depth=args.ancestry_depth if args.ancestry_depth is not None else cfg.ancestry_depth,
        progeny_depth=args.progeny_depth if args.progeny_depth is not None else cfg.progeny_depth,
        show_siblings_of_main=args.siblings or cfg.show_siblings_of_main,
    )


def cmd_tree(args, cfg: Config) -> int:
    store = _load_store(args.data)
    tree = _build_tree(store, args, cfg)
    if args.json:
        out = [
            {
                "id": n.id,
                "tid": n.tid,
                "depth": n.depth,
                "is_ancestry": n.is_ancestry,
                "main": n.main,
                "sibling": n.sibling,
                "spouse": n.spouse.id if n.spouse else None,
                "parent": n.parent.id if n.parent else None,
                "all_rels_displayed": n.all_rels_displayed,
            }
            for n in tree.nodes
        ]
        print(json.dumps({"main_id": tree.main_id, "nodes": out}, ensure_ascii=False, indent=2))
        return 0
    for n in tree.nodes:
        extra = f" (spouse of {n.spouse.id})" if n.spouse else ""
        print(f"{n.tid:>4}  {_side(n):<8} depth={n.depth}  {n.id}  {_node_label(n)}{extra}")
    print(f"{len(tree)} node(s), max ancestry depth {tree.max_ancestry_depth}")
    return 0


def cmd_delays(args, cfg: Config) -> int:
    store = _load_store(args.data)
    tree = _build_tree(store, args, cfg)
    transition = args.transition_time if args.transition_time is not None else cfg.transition_time
    for n in tree.nodes:
        print(f"{n.id}\t{calculate_delay(tree, n, transition):.1f}")
    return 0


def cmd_validate(args, cfg: Config) -> int:
    store = _load_store(args.data)
    findings = store.validate()
    if args.json:
        print(json.dumps([f.to_dict() for f in findings], ensure_ascii=False, indent=2))
    else:
        for f in findings:
            print(f"{f.kind}: {f.message}")
        print(f"{len(findings)} finding(s) in {len(store)} person(s)")
    return 1 if findings else 0


def cmd_normalize(args, cfg: Config) -> int:
    store = _load_store(args.data)
    if args.keep_shape:
        out = store.export()
    else:
        out = [p.to_dict(all_rels=True) for p in store.data]
    if args.output:
        json_save(Path(args.output), out)
        logging.info("normalize: wrote %d record(s) to %s", len(out), args.output)
    else:
        print(json.dumps(out, ensure_ascii=False, indent=2))
    return 0


def cmd_generate(args, cfg: Config) -> int:
    gen = GENERATORS[args.kind]
    data = gen(args.size) if args.size is not None else gen()
    json_save(Path(args.output), data)
    print(f"Wrote {len(data)} person(s) to {args.output}")
    return 0


def _add_tree_options(p: argparse.ArgumentParser) -> None:
    p.add_argument("data", help="Path to a JSON dataset")
    p.add_argument("--main-id", required=True, help="Id of the person the tree is built around")
    p.add_argument("--ancestry-depth", type=int, default=None)
    p.add_argument("--progeny-depth", type=int, default=None)
    p.add_argument("--siblings", action="store_true", help="Include siblings of the main person")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="familychart", description="Family tree calculation tools")
    parser.add_argument("--config", default=None, help="Path to a JSON config file")
    subparsers = parser.add_subparsers(title="Commands", dest="command")

    p_tree = subparsers.add_parser("tree", help="Compute and print the tree around a person")
    _add_tree_options(p_tree)
    p_tree.add_argument("--json", action="store_true")
    p_tree.set_defaults(func=cmd_tree)

    p_delays = subparsers.add_parser("delays", help="Print animation delays for a tree")
    _add_tree_options(p_delays)
    p_delays.add_argument("--transition-time", type=float, default=None, help="Transition duration in ms")
    p_delays.set_defaults(func=cmd_delays)

    p_val = subparsers.add_parser("validate", help="Report integrity problems in a dataset")
    p_val.add_argument("data")
    p_val.add_argument("--json", action="store_true")
    p_val.set_defaults(func=cmd_validate)

    p_norm = subparsers.add_parser("normalize", help="Rewrite a dataset in the parents shape")
    p_norm.add_argument("data")
    p_norm.add_argument("-o", "--output", default=None)
    p_norm.add_argument("--keep-shape", action="store_true", help="Write each record back in its original shape")
    p_norm.set_defaults(func=cmd_normalize)

    p_gen = subparsers.add_parser("generate", help="Write a synthetic dataset")
    p_gen.add_argument("kind", choices=sorted(GENERATORS))
    p_gen.add_argument("--size", type=int, default=None, help="Generator size parameter")
    p_gen.add_argument("-o", "--output", required=True)
    p_gen.set_defaults(func=cmd_generate)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config(args.config)
    logging.basicConfig(level=getattr(logging, cfg.log_level, logging.WARNING))
    if not args.command:
        parser.print_help()
        return 0
    try:
        return args.func(args, cfg)
    except (NotFound, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON in {getattr(args, 'data', '?')}: {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
