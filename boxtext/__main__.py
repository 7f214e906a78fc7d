import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

from boxtext.config import TEXT_ANCHORS, VERTICAL_ALIGNS, Settings, load_settings
from boxtext.services.text_box import TextBox, key_accessor

logger = logging.getLogger(__name__)

PER_ITEM_STYLE_KEYS = ("font_family", "font_size", "font_weight", "font_color", "vertical_align", "text_anchor")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="boxtext",
        description="Fit each item's text into its box and print the layout records as JSON.",
    )
    parser.add_argument("items", type=Path, help="JSON file with a list of item objects")
    parser.add_argument("-o", "--output", type=Path, help="write records here instead of stdout")
    parser.add_argument("--resize", action="store_true", help="let font size shrink to fit each box")
    parser.add_argument("--vertical-align", choices=sorted(VERTICAL_ALIGNS))
    parser.add_argument("--text-anchor", choices=sorted(TEXT_ANCHORS))
    parser.add_argument("--parallel", action="store_true", help="lay items out in worker threads")
    return parser


def _load_items(path: Path) -> list[Any]:
    items = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(items, list):
        raise ValueError(f"{path} must contain a JSON list of items")
    return items


def create_text_box(args: argparse.Namespace, settings: Settings) -> TextBox:
    text_box = TextBox(settings)

    # Items may carry their own style keys; the settings value is the fallback.
    overrides: dict[str, Any] = {}
    for key in PER_ITEM_STYLE_KEYS:
        overrides[key] = key_accessor(key, getattr(settings, key))
    if args.vertical_align:
        overrides["vertical_align"] = key_accessor("vertical_align", args.vertical_align)
    if args.text_anchor:
        overrides["text_anchor"] = key_accessor("text_anchor", args.text_anchor)
    if args.resize:
        overrides["font_resize"] = True
    return text_box.configure(**overrides)


async def main(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)
    settings = load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        items = _load_items(args.items)
    except (OSError, ValueError) as exc:
        logger.exception("Could not read items from %s: %s", args.items, exc)
        return 1

    text_box = create_text_box(args, settings)
    if args.parallel:
        records = await text_box.layout_async(items)
    else:
        records = text_box.layout(items)

    payload = json.dumps([record.to_dict() for record in records], ensure_ascii=False, indent=2)
    if args.output:
        args.output.write_text(payload + "\n", encoding="utf-8")
        logger.info("Wrote %s records to %s", len(records), args.output)
    else:
        print(payload)
    return 0


def run() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    run()
