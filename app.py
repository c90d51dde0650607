#!/usr/bin/env python3
"""
Crew Graphics Generator
Renders a social-media crew lineup PNG for every crew in a CSV or Excel roster.
Columns: Name, Club, Race, Boat, Crew (stroke first, ';' separated), Cox, Coach.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import DEFAULT_HEIGHT, DEFAULT_WIDTH, LOGO_DIR, OUTPUT_DIR
from data_loaders import HttpClubPresetLookup, crew_payloads, load_crews_dataframe
from errors import CrewImageError
from generator import CrewImageGenerator
from repository import DirectoryLogoStore
from templates import TEMPLATES, list_templates
from utils import next_free_filename, safe_png_filename

_APP_DIR = Path(__file__).resolve().parent

# Default input for demos (safe template committed to repo)
DEFAULT_ROSTER = _APP_DIR / "input" / "template_crews.csv"

log = logging.getLogger("crew_graphics")


class CrewImageBatch:
    """Generates crew images for every row of a roster file."""

    def __init__(
        self,
        roster_path: str,
        template_id: str = "classic-lineup",
        output_dir: str = OUTPUT_DIR,
        *,
        template_config: Optional[Dict[str, Any]] = None,
        preset_id: Optional[str] = None,
        club_icon: Optional[Dict[str, Any]] = None,
        generator: Optional[CrewImageGenerator] = None,
    ):
        self.roster_path = roster_path
        self.template_id = template_id
        self.output_dir = Path(output_dir)
        # Don't mkdir here; only create the folder right before writing files.
        self.template_config = template_config or {}
        self.preset_id = preset_id
        self.club_icon = club_icon
        self.generator = generator or CrewImageGenerator()

    def payload_for(self, crew: Dict[str, Any]) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"crew": crew, "templateId": self.template_id}
        if self.template_config:
            payload["templateConfig"] = self.template_config
        if self.preset_id:
            payload["presetId"] = self.preset_id
        if self.club_icon:
            payload["clubIcon"] = self.club_icon
        return payload

    def generate_all(self) -> List[Path]:
        """Generate images for all crews; a bad row is reported and skipped."""
        df = load_crews_dataframe(self.roster_path)
        stats = df.attrs.get("load_stats", {})
        crews = list(crew_payloads(df))
        print(f"Found {len(crews)} crews ({stats.get('source_rows', len(crews))} rows in roster)")

        written: List[Path] = []
        self.output_dir.mkdir(exist_ok=True, parents=True)
        for i, crew in enumerate(crews, 1):
            print(f"Generating image {i}/{len(crews)}: {crew['name']} ({crew['boatType']})")
            try:
                image = self.generator.generate_from_payload(self.payload_for(crew))
            except CrewImageError as e:
                print(f"Error generating image for {crew['name']}: {e.message}")
                continue
            path = next_free_filename(self.output_dir, safe_png_filename(crew["name"]))
            path.write_bytes(image.data)
            log.debug("Wrote %s (%d bytes)", path, len(image.data))
            written.append(path)

        print(f"\nCompleted! Generated {len(written)}/{len(crews)} images in '{self.output_dir}' directory")
        return written


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    import argparse

    parser = argparse.ArgumentParser(description='Generate rowing crew lineup images')
    parser.add_argument('data', nargs='?', default=str(DEFAULT_ROSTER), help='Path to Excel (.xlsx) or CSV roster')
    parser.add_argument('-t', '--template', default='classic-lineup', help='Template id (see --list-templates)')
    parser.add_argument('-o', '--output', default=OUTPUT_DIR, help=f'Output directory (default: {OUTPUT_DIR})')
    parser.add_argument('--width', type=int, help='Image width in pixels')
    parser.add_argument('--height', type=int, help='Image height in pixels')
    parser.add_argument('--primary', help='Primary color, e.g. #1e40af')
    parser.add_argument('--secondary', help='Secondary color, e.g. #2563eb')
    parser.add_argument('--preset-id', help='Club preset id (needs --preset-url)')
    parser.add_argument('--preset-url', help='Base URL of the club preset API')
    parser.add_argument('--icon', help='Club icon image file to overlay')
    parser.add_argument('--logo', help='Preset club logo filename from --logo-dir')
    parser.add_argument('--logo-dir', default=str(LOGO_DIR), help='Directory of preset club logos')
    parser.add_argument('--list-templates', action='store_true', help='List template ids and exit')
    parser.add_argument('-v', '--verbose', action='store_true', help='Log render stages')

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_templates:
        for t in list_templates():
            print(f"{t['id']:<20} {t['category']:<12} {t['description']}")
        return 0

    if args.template not in TEMPLATES:
        print(f"Error: unknown template {args.template!r}. Use --list-templates.")
        return 2

    template_config: Dict[str, Any] = {}
    if args.width or args.height:
        template_config["dimensions"] = {"width": args.width or DEFAULT_WIDTH, "height": args.height or DEFAULT_HEIGHT}
    if bool(args.primary) != bool(args.secondary):
        print("Error: --primary and --secondary must be given together.")
        return 2
    if args.primary:
        template_config["colors"] = {"primary": args.primary, "secondary": args.secondary}

    club_icon = None
    if args.icon:
        icon_path = Path(args.icon)
        if not icon_path.is_file():
            print(f"Error: club icon not found at {icon_path}")
            return 2
        club_icon = {"type": "upload", "fileBytes": icon_path.read_bytes(), "filename": icon_path.name}
    elif args.logo:
        club_icon = {"type": "preset", "filename": args.logo}

    presets = HttpClubPresetLookup(args.preset_url) if args.preset_url else None
    generator = CrewImageGenerator(presets=presets, logos=DirectoryLogoStore(Path(args.logo_dir)))

    batch = CrewImageBatch(
        args.data,
        args.template,
        args.output,
        template_config=template_config,
        preset_id=args.preset_id,
        club_icon=club_icon,
        generator=generator,
    )
    try:
        written = batch.generate_all()
    except (OSError, ValueError, ImportError) as e:
        print(f"Error reading roster: {e}")
        return 1
    except RuntimeError as e:
        # Club preset API unreachable or misbehaving.
        print(f"Error: {e}")
        return 1
    return 0 if written else 1


if __name__ == '__main__':
    sys.exit(main())
