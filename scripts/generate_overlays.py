#!/usr/bin/env python3
"""
Write placeholder overlay art for every catalog entity
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from possessao.core.catalog import get_catalog
from possessao.core.entities import CAMERA_ORIENTATIONS
from possessao.core.placeholder_overlays import generate_placeholder_overlays
from possessao.utils.config import settings


def main():
    parser = argparse.ArgumentParser(description="Generate placeholder overlay PNGs")
    parser.add_argument("--output-dir", default=settings.OVERLAY_DIR,
                       help=f"Where to write the overlays (default: {settings.OVERLAY_DIR})")
    parser.add_argument("--entity", action="append", dest="entities",
                       help="Only generate for this entity id (repeatable)")
    parser.add_argument("--orientation", action="append", dest="orientations",
                       choices=list(CAMERA_ORIENTATIONS),
                       help="Only generate for this camera orientation (repeatable)")
    parser.add_argument("--no-defaults", action="store_true",
                       help="Skip the default_<orientation>.png fallbacks")

    args = parser.parse_args()

    catalog = get_catalog()
    entity_ids = args.entities or catalog.ids()
    unknown = [e for e in entity_ids if e not in catalog]
    if unknown:
        print(f"Error: unknown entities: {', '.join(unknown)}")
        return 1

    written = generate_placeholder_overlays(
        args.output_dir,
        entity_ids,
        orientations=args.orientations or CAMERA_ORIENTATIONS,
        include_defaults=not args.no_defaults
    )
    print(f"Wrote {len(written)} overlays to {args.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
