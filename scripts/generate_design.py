#!/usr/bin/env python3
"""
Generate a costume design from a brief.

This script:
1. Looks up real conditions at the filming location (best-effort)
2. Runs the design conversation with Gemini
3. Renders concept art for the look
4. Saves design.json and concept_art.<ext> to a timestamped run directory

Usage:
    python scripts/generate_design.py --location London \
        --project "Feature film" --scene "EXT. ALLEY - NIGHT. Chase in heavy rain." \
        --character "Disgraced detective, 50s" --psychology "Guilt turning into resolve"
"""

import argparse
import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from api import CostumePipeline  # noqa: E402
from config import API_KEY_ENV, get_env  # noqa: E402
from design_pipeline.models import DesignBrief  # noqa: E402
from exceptions import CostumePipelineError  # noqa: E402
from logging_config import setup_logging  # noqa: E402
from util.data_url import parse_data_url  # noqa: E402

EXTENSIONS = {"image/png": "png", "image/jpeg": "jpg", "image/webp": "webp"}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a costume design from a brief.")
    parser.add_argument("--project", required=True, help="Project type (e.g. 'Feature film')")
    parser.add_argument("--scene", required=True, help="Scene context")
    parser.add_argument("--character", required=True, help="Character profile")
    parser.add_argument("--psychology", required=True, help="Psychological state")
    parser.add_argument("--location", required=True, help="Filming location")
    parser.add_argument("--constraints", default="", help="Production constraints")
    parser.add_argument("--output-dir", type=Path, default=Path("output/runs"), help="Base output directory")
    parser.add_argument("--verbose", action="store_true", help="Enable DEBUG logging")
    return parser.parse_args(argv)


def save_design(design, run_dir: Path) -> Path:
    """Write the design JSON and decoded concept art into run_dir."""
    run_dir.mkdir(parents=True, exist_ok=True)
    payload = design.model_dump(by_alias=True, exclude={"concept_art_url"})
    design_path = run_dir / "design.json"
    design_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")

    if design.concept_art_url:
        mime_type, data = parse_data_url(design.concept_art_url)
        art_path = run_dir / f"concept_art.{EXTENSIONS.get(mime_type, 'bin')}"
        art_path.write_bytes(data)
    return design_path


async def main(argv=None) -> int:
    args = parse_args(argv)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    run_dir = args.output_dir / timestamp / "design"

    logger = setup_logging(
        "",
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=run_dir / "generate_design.log",
        secrets=[get_env(API_KEY_ENV, "")],
    )

    brief = DesignBrief(
        project_type=args.project,
        scene_context=args.scene,
        character_profile=args.character,
        psychological_state=args.psychology,
        filming_location=args.location,
        production_constraints=args.constraints,
    )

    try:
        pipeline = CostumePipeline.from_env()
        design = await pipeline.generate_design(brief)
    except CostumePipelineError as e:
        logger.error(f"Design generation failed: {e}")
        return 1

    design_path = save_design(design, run_dir)
    logger.info(f"Saved design '{design.title}' to {design_path}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
