# collage/cli.py
# python -m collage.cli data/collage.json out/collage.pdf --renderer html

import argparse
import json
import logging
import sys
from pathlib import Path

from collage.core.config import get_settings
from collage.core.errors import CollageError
from collage.schemas.collage import parse_collage
from collage.services.compositor.renderers import RENDERERS, render_collage


def _load_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="콜라주 JSON → PDF")
    parser.add_argument("collage_json", type=Path)
    parser.add_argument("out_pdf", type=Path)
    parser.add_argument("--renderer", choices=sorted(RENDERERS), default=settings.renderer)
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else settings.log_level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if not args.collage_json.exists():
        print(f"[Collage][ERROR] 입력 파일 없음: {args.collage_json}", file=sys.stderr)
        return 1

    try:
        collage = parse_collage(_load_json(args.collage_json))
        pdf_bytes = render_collage(collage, args.renderer, settings)
    except json.JSONDecodeError as e:
        print(f"[Collage][ERROR] JSON 파싱 실패: {e}", file=sys.stderr)
        return 1
    except CollageError as e:
        print(f"[Collage][ERROR] {e}", file=sys.stderr)
        return 1

    args.out_pdf.parent.mkdir(parents=True, exist_ok=True)
    args.out_pdf.write_bytes(pdf_bytes)
    print(f"✅ {len(collage.pages)} pages → {args.out_pdf} ({len(pdf_bytes):,} bytes)")
    return 0


if __name__ == "__main__":
    sys.exit(main())
