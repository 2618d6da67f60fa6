import argparse
import logging
import os
import sys
from pathlib import Path
from typing import Iterator, List, Optional

from dotenv import load_dotenv
from tqdm import tqdm

# Load environment variables first
load_dotenv()

from ..models.image import Image
from ..pipeline.art_grid import ArtGridPipeline
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)


def _gather(image_service: ImageService, inputs: List[str]) -> Iterator[Image]:
    for raw in inputs:
        path = Path(raw)
        if path.is_dir():
            yield from image_service.stream_gallery(path)
            continue
        img = Image()
        if image_service.load_into(img, path):
            yield img


def main(argv: Optional[List[str]] = None) -> int:
    # --- Centralized Logging Configuration ---
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    ap = argparse.ArgumentParser(description="Render a 4x5 grid of pixmap operators for each image.")
    ap.add_argument("inputs", nargs="+", help="image files or folders of images")
    ap.add_argument("--out", default=os.getenv("ART_OUTPUT_DIR", "output"),
                    help="directory the grids are written to")
    ap.add_argument("--seed", type=int, default=None, help="seed for the colour jitter tile")
    ap.add_argument("--ghost", action="store_true", help="also write a <name>_ghost.png per image")
    args = ap.parse_args(argv)

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)

    image_service = ImageService()
    pipeline = ArtGridPipeline(seed=args.seed)

    images = list(_gather(image_service, args.inputs))
    if not images:
        logger.error("No readable images given. Exiting...")
        return 1

    failures = 0
    for img in tqdm(images, desc="grids", ncols=70):
        name = img.path.stem if img.path else "image"
        grid = pipeline.build(img)
        failures += not image_service.save(grid, out_dir / f"{name}.png")
        if args.ghost:
            failures += not image_service.save(pipeline.ghost(img), out_dir / f"{name}_ghost.png")

    logger.info(f"Wrote {len(images)} grid(s) to {out_dir.resolve()}")
    return 1 if failures else 0


if __name__ == "__main__":
    sys.exit(main())
