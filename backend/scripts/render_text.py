"""Render styled text to a PNG or SVG file without running the API.

Usage:
    python backend/scripts/render_text.py "HELLO" [--preset neon] [--seed 123] [--format png|svg] [--out hello.png]

Without --preset a random transformation is drawn; --seed makes both the
transformation and the per-letter jitter reproducible.
"""

from __future__ import annotations

import argparse
import json
import logging
import random
import sys
from pathlib import Path

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from domain.errors import AppError
from services.generator import generate_from_preset, generate_random, list_presets
from services.rasterizer import PREVIEW_SIZE, SHARE_CARD_SIZE, render, render_svg
from services.validation import validate_text

logger = logging.getLogger("render_text")

SIZES = {"preview": PREVIEW_SIZE, "share": SHARE_CARD_SIZE}


def main(argv: list[str] | None = None) -> int:
    if not logger.handlers:
        logging.basicConfig(level=logging.INFO, format="%(message)s")
    parser = argparse.ArgumentParser(description="Render text with per-letter styling.")
    parser.add_argument("text", help="Text to render (1-100 characters).")
    parser.add_argument("--preset", choices=list_presets(), default=None)
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--format", choices=("png", "svg"), default="png")
    parser.add_argument("--size", choices=sorted(SIZES), default="preview")
    parser.add_argument("--out", default=None, help="Output path (defaults to lettercraft-<text>.<format>).")
    parser.add_argument("--print-transformation", action="store_true", help="Log the transformation as JSON.")
    args = parser.parse_args(argv)

    errors = validate_text(args.text)
    if errors:
        logger.error("Invalid text: %s", errors[0].message)
        return 2

    seed = args.seed if args.seed is not None else random.randrange(2**31)
    transformation = generate_from_preset(args.preset) if args.preset else generate_random(random.Random(seed))
    if args.print_transformation:
        logger.info(json.dumps(transformation.to_dict(), indent=2))

    out_path = Path(args.out or f"lettercraft-{args.text.lower().replace(' ', '-')}.{args.format}")
    try:
        if args.format == "svg":
            out_path.write_text(render_svg(args.text, transformation, size=SIZES[args.size], rng=random.Random(seed)))
        else:
            out_path.write_bytes(render(args.text, transformation, size=SIZES[args.size], rng=random.Random(seed)))
    except AppError as exc:
        logger.error("Render failed: %s", exc.message)
        return 1

    logger.info("Wrote %s (seed=%s)", out_path, seed)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
