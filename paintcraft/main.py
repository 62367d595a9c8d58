from __future__ import annotations

import argparse
import json
import logging
from typing import Any

from paintcraft.src.color_engine.colorspace import hex_to_rgb
from paintcraft.src.color_engine.extract import PaletteExtractor
from paintcraft.src.color_engine.io import read_pixel_buffer, write_json
from paintcraft.src.color_engine.mixer import MixRecipeSolver
from paintcraft.src.color_engine.models import Material, StepType
from paintcraft.src.color_engine.pipeline import ColorPaletteService
from paintcraft.src.color_engine.quick import extract_image_colors
from paintcraft.src.color_engine.recipes import generate_mixing_recipe
from paintcraft.src.color_engine.steps import colors_for_step

_MATERIALS = [material.value for material in Material]
_STEP_TYPES = [step.value for step in StepType]


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paintcraft-color",
        description="Palette extraction and paint mixing recipes for painting tutorials.",
    )
    parser.add_argument(
        "--verbose", action="store_true", help="Enable debug logging."
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    palette = subparsers.add_parser(
        "palette", help="Extract a representative color palette from an image."
    )
    palette.add_argument("--image", required=True, help="Path or URL to the input image.")
    palette.add_argument(
        "--material",
        choices=_MATERIALS,
        default=Material.ACRYLIC.value,
        help="Drawing material echoed back in the response.",
    )
    palette.add_argument(
        "--max-colors",
        type=int,
        default=8,
        help="Number of colors to extract (clamped to 3-12).",
    )
    palette.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Pin the random source for reproducible clustering.",
    )
    palette.add_argument(
        "--out", default=None, help="Optional JSON output path."
    )

    recipe = subparsers.add_parser(
        "recipe", help="Compute paint mixing recipes for one or more target colors."
    )
    recipe.add_argument(
        "--hex",
        dest="hexes",
        action="append",
        required=True,
        help="Target color as #RRGGBB. Repeat for several colors.",
    )
    recipe.add_argument("--out", default=None, help="Optional JSON output path.")

    mix = subparsers.add_parser(
        "mix", help="Basic-color mixing guidance for a color and material."
    )
    mix.add_argument("--hex", required=True, help="Color as #RRGGBB.")
    mix.add_argument("--material", choices=_MATERIALS, required=True)
    mix.add_argument("--out", default=None, help="Optional JSON output path.")

    colors = subparsers.add_parser(
        "colors", help="Quick color listing with background detection."
    )
    colors.add_argument("--image", required=True, help="Path or URL to the input image.")
    colors.add_argument(
        "--step", choices=_STEP_TYPES, default=None, help="Filter colors for a step."
    )
    colors.add_argument("--out", default=None, help="Optional JSON output path.")

    return parser


def _emit(payload: Any, out: str | None) -> None:
    if out:
        write_json(payload, out)
    else:
        print(json.dumps(payload, indent=2, ensure_ascii=False))


def main(argv: list[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "palette":
        service = ColorPaletteService(extractor=PaletteExtractor(random_state=args.seed))
        result = service.run(
            image_path=args.image,
            material=Material(args.material),
            max_colors=args.max_colors,
        )
        _emit(result.to_dict(), args.out)
        return

    if args.command == "recipe":
        solver = MixRecipeSolver()
        try:
            solved = solver.solve_many(args.hexes)
        except ValueError as exc:
            parser.error(str(exc))
        results = [response.to_dict() for _, response in solved]
        _emit(results[0] if len(results) == 1 else results, args.out)
        return

    if args.command == "mix":
        try:
            rgb = hex_to_rgb(args.hex)
        except ValueError as exc:
            parser.error(str(exc))
        recipe = generate_mixing_recipe(rgb, args.material)
        _emit(recipe.to_dict(), args.out)
        return

    if args.command == "colors":
        found = extract_image_colors(read_pixel_buffer(args.image))
        if args.step:
            found = colors_for_step(args.step, found)
        _emit([color.to_dict() for color in found], args.out)
        return

    parser.error("unknown command")


if __name__ == "__main__":
    main()
