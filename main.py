#!/usr/bin/env python3
"""
Four-Cut Collage — CLI Entry Point
===================================

Usage examples::

    # Four photos, default caption, saved to the album directory
    python main.py shot1.jpg shot2.jpg shot3.jpg shot4.jpg

    # Decorate cuts 0 and 2 with overlays, write to a fixed path
    python main.py a.jpg b.jpg c.jpg d.jpg \\
                   --overlay 0=frames/hearts.png --overlay 2=frames/stars.png \\
                   -o output/collage.png

    # Custom caption and config
    python main.py a.jpg b.jpg c.jpg d.jpg --caption "Summer 2024" -c my_config.yaml
"""

import argparse
import dataclasses
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

# Ensure project root is on sys.path for imports
PROJECT_ROOT = Path(__file__).resolve().parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def parse_overlay(value: str) -> Tuple[int, str]:
    """Parse ``SLOT=PATH`` into ``(slot, path)``."""
    slot, sep, path = value.partition("=")
    if not sep or not path:
        raise argparse.ArgumentTypeError(f"Expected SLOT=PATH, got {value!r}")
    try:
        index = int(slot)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Overlay slot must be 0–3, got {slot!r}")
    if not 0 <= index <= 3:
        raise argparse.ArgumentTypeError(f"Overlay slot must be 0–3, got {index}")
    return index, path


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Four-Cut Collage — "
                    "Composite four photos and a caption into one 2×2 image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
  python main.py a.jpg b.jpg c.jpg d.jpg
  python main.py a.jpg b.jpg c.jpg d.jpg --overlay 1=frame.png -o output/collage.png
  python main.py a.jpg b.jpg c.jpg d.jpg --caption "Graduation Day"
""",
    )

    # ── Required ─────────────────────────────────────────────────────
    parser.add_argument(
        "images",
        nargs=4,
        metavar="IMAGE",
        help="The four photos, in cut order (top-left, top-right, bottom-left, bottom-right)",
    )

    # ── Optional ─────────────────────────────────────────────────────
    parser.add_argument(
        "--overlay",
        type=parse_overlay,
        action="append",
        default=[],
        metavar="SLOT=PATH",
        help="Overlay image for a cut (0–3); may be repeated",
    )
    parser.add_argument(
        "--caption",
        type=str,
        default=None,
        help="Override the caption text from the config",
    )
    parser.add_argument(
        "-o", "--output",
        type=str,
        default=None,
        help="Output file path (default: timestamped file in the album directory)",
    )
    parser.add_argument(
        "-c", "--config",
        type=str,
        default="config.yaml",
        help="Path to config YAML (default: config.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug-level logging",
    )

    return parser.parse_args(argv)


def setup_logging(verbose: bool = False):
    """Configure logging for the pipeline."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s │ %(name)-24s │ %(levelname)-5s │ %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("PIL").setLevel(logging.WARNING)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)

    log = logging.getLogger("main")
    overlays: Dict[int, str] = dict(args.overlay)
    log.info("=" * 60)
    log.info("  Four-Cut Collage")
    log.info("=" * 60)
    for i, image in enumerate(args.images):
        log.info(f"  Cut {i}:      {image}  (overlay: {overlays.get(i, '(none)')})")
    log.info(f"  Caption:    {args.caption or '(from config)'}")
    log.info(f"  Output:     {args.output or '(album)'}")
    log.info(f"  Config:     {args.config}")
    log.info("=" * 60)

    missing = [p for p in list(args.images) + list(overlays.values()) if not Path(p).exists()]
    if missing:
        for p in missing:
            log.error(f"Image not found: {p}")
        return 1

    from fourcut.errors import FourCutError
    from fourcut.fourcut_pipeline import FourCutPipeline
    from fourcut.sources import FileImageSource

    if Path(args.config).exists():
        pipeline = FourCutPipeline.from_config(args.config)
    else:
        log.warning(f"Config {args.config} not found — using built-in defaults")
        pipeline = FourCutPipeline()

    if args.caption is not None:
        pipeline.canvas = dataclasses.replace(pipeline.canvas, caption=args.caption)
        pipeline.renderer.canvas = pipeline.canvas

    try:
        output = pipeline.run(
            FileImageSource(args.images),
            overlay_sources={slot: FileImageSource([path]) for slot, path in overlays.items()},
            output_path=args.output,
        )
    except (FourCutError, OSError) as e:
        log.error(f"Collage not created: {e}")
        return 1

    log.info(f"✅ Collage saved to: {output['collage_path']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
