import argparse
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from mocktsy.catalog import MOCKUP_CATALOG
from mocktsy.core import MockupPipeline, load_job
from mocktsy.images import DEFAULT_TIMEOUT
from mocktsy.render import FontChoices


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Build the mockup plan for a clipart collection and export it as a ZIP of PNGs."
    )
    parser.add_argument(
        "--job",
        type=Path,
        required=True,
        help="Path to the job JSON file (collection name, selected mockups, image pools, text).",
    )
    parser.add_argument(
        "--output-root",
        type=Path,
        default=Path("outputs"),
        help="Root folder where the plan, archive and PDF will be stored.",
    )
    parser.add_argument(
        "--pdf",
        action="store_true",
        help="Also write a multi-page PDF with one mockup per page.",
    )
    parser.add_argument(
        "--plan-only",
        action="store_true",
        help="Print the build plan as JSON and stop before rendering.",
    )
    parser.add_argument(
        "--list-mockups",
        action="store_true",
        help="List the mockup catalog and exit.",
    )
    return parser.parse_args()


def print_progress(done: int, total: int) -> None:
    print(f"  [{done}/{total}] rendered")


def main() -> None:
    # Load environment variables from a local .env file if present
    # (e.g. MOCKTSY_HEADING_FONT=/path/to/font.ttf).
    load_dotenv()

    logging.basicConfig(
        level=os.environ.get("MOCKTSY_LOG_LEVEL", "WARNING").upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )

    args = parse_args()

    if args.list_mockups:
        for mockup in MOCKUP_CATALOG.values():
            print(f"{mockup.id:>3}  {mockup.name}  ({mockup.image_rule.slot_count} x {mockup.image_rule.source.value})")
        return

    fonts = FontChoices(
        heading_font_path=os.environ.get("MOCKTSY_HEADING_FONT") or None,
        body_font_path=os.environ.get("MOCKTSY_BODY_FONT") or None,
    )
    timeout = float(os.environ.get("MOCKTSY_HTTP_TIMEOUT") or DEFAULT_TIMEOUT)

    pipeline = MockupPipeline(
        output_root=args.output_root,
        fonts=fonts,
        timeout=timeout,
        write_pdf=args.pdf,
        on_progress=print_progress,
    )

    if args.plan_only:
        plan = pipeline.build(load_job(args.job))
        print(plan.to_json())
        return

    result = pipeline.run(args.job)
    print(f"📝 Plan:    {result.plan_path}")
    print(f"📦 Archive: {result.archive_path} ({len(result.entries)} images)")
    if result.pdf_path:
        print(f"📄 PDF:     {result.pdf_path}")


if __name__ == "__main__":
    main()
