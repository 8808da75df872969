#!/usr/bin/env python3
"""Extract timed slide records from a .pptx deck and write them as JSON.

Each record carries an embedded image (data URI), the slide's text, its
manifest slide number and a start time / duration.

Usage:
    python scripts/extract_slides.py deck.pptx [-o workspace/slides.json]
        [--config config.yaml] [--converter {none,libreoffice,pdf}]
        [--audio-duration 95.5 --sync-method text-based]

Without a converter, images come from the package itself (embedded media,
or a synthetic render of the slide's text layout). With --converter,
LibreOffice must be installed; if it is not, extraction falls back to
direct parsing.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from slidereel.converters import LibreOfficeConverter, PdfPageConverter
from slidereel.errors import PresentationParseError
from slidereel.pipeline import extract_slides_from_file
from slidereel.schemas.config import ExtractionConfig
from slidereel.timing import SYNC_METHODS, sync_slides
from slidereel.utils.file_utils import save_json

logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

_CONVERTERS = {
    "libreoffice": LibreOfficeConverter,
    "pdf": PdfPageConverter,
}


def main():
    parser = argparse.ArgumentParser(description="Extract timed slide records from a .pptx deck")
    parser.add_argument("input_file", type=Path, help="Input .pptx path")
    parser.add_argument("-o", "--output", type=Path, default=Path("workspace/slides.json"),
                        help="Output JSON path (default: workspace/slides.json)")
    parser.add_argument("--config", type=Path, default=None,
                        help="Extraction config YAML (optional)")
    parser.add_argument("--converter", choices=["none", *_CONVERTERS], default="none",
                        help="High-fidelity converter to try before direct parsing")
    parser.add_argument("--audio-duration", type=float, default=None,
                        help="Narration length in seconds; re-times slides to fit")
    parser.add_argument("--sync-method", choices=SYNC_METHODS, default="auto",
                        help="Timing method used with --audio-duration")
    args = parser.parse_args()

    if not args.input_file.exists():
        print(f"Error: Input file not found: {args.input_file}", file=sys.stderr)
        sys.exit(1)

    config = ExtractionConfig.from_yaml(args.config) if args.config else ExtractionConfig()
    converter = None
    if args.converter != "none":
        converter = _CONVERTERS[args.converter].from_config(config.converter)

    print(f"Extracting: {args.input_file}")
    try:
        slides = extract_slides_from_file(args.input_file, converter=converter, config=config)
    except (PresentationParseError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.audio_duration is not None:
        slides = sync_slides(slides, args.audio_duration, method=args.sync_method)

    save_json([s.to_dict() for s in slides], args.output)
    print(f"Slides written to: {args.output}")
    for s in slides:
        preview = s.text[:60] + ("..." if len(s.text) > 60 else "")
        print(f"  {s.id}: {s.start_time:.1f}s +{s.duration:.1f}s  {preview}")


if __name__ == "__main__":
    main()
