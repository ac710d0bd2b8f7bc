from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from kinship import config
from kinship.graph import build_tree_view
from kinship.importers.tree_json import parse_tree_json
from kinship.relations.adapter import find_suspect_couples, to_layout_input


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run the tree layout over a dumped tree response")
    parser.add_argument("file_path", help="Path to a tree response JSON dump")
    parser.add_argument("--root-id", type=int, default=None, help="Lay out from this person instead of rootPersonId")
    parser.add_argument("--orientation", choices=config.ORIENTATIONS, default=config.ROOT_ORIENTATION)
    parser.add_argument("--crash-dump", default="crash_nodes.json", help="Where to write the layout input on failure")
    args = parser.parse_args(argv)

    logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    file_path = Path(args.file_path)
    if not file_path.exists():
        raise SystemExit(f"File not found: {file_path}")

    snapshot = parse_tree_json(file_path)
    view = build_tree_view(snapshot, root_id=args.root_id, root_orientation=args.orientation)

    if view.root_id is None:
        print(f"Root person not found among {len(snapshot.persons)} persons")
        return 1

    print(f"Root {view.root_id}: {len(view.nodes)} nodes, {len(view.ancestors)} in ancestor cone")

    suspects = view.error.suspects if view.error else find_suspect_couples(to_layout_input(view.nodes))
    if suspects:
        print("\n⚠️  SUSPECT COUPLES:")
        for s in suspects:
            print(f"  - {s}")
        print()

    if view.error is not None:
        crash_path = Path(args.crash_dump)
        crash_path.write_text(json.dumps(view.error.nodes, indent=2), encoding="utf-8")
        print(f"Layout FAILED: {view.error.message}")
        print(f"Layout input written to {crash_path}")
        return 2

    layout = view.layout
    print(f"Layout OK: {len(layout.nodes)} placed on {layout.width}x{layout.height}, "
          f"{len(layout.connectors)} connectors{' (mirrored)' if layout.mirrored else ''}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
