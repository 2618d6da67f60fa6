import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

# Load environment variables first
load_dotenv()

from ..models.image import Image
from ..services.image_service import ImageService

logger = logging.getLogger(__name__)

# Images with more pixels than this only get their size logged.
MAX_DUMPED_PIXELS = 64


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)-25s - %(levelname)-8s - %(message)s',
        datefmt='%H:%M:%S'
    )

    ap = argparse.ArgumentParser(description="Print an image's pixels and re-save it.")
    ap.add_argument("path", help="image to inspect")
    ap.add_argument("--resave", default=None,
                    help="where to write the decoded image back (default: <stem>-test-save.png)")
    args = ap.parse_args(argv)

    image_service = ImageService()
    img = Image()
    if not image_service.load_into(img, args.path):
        logger.error("Cannot load image! Exiting...")
        return 1

    logger.info(f"Loaded {args.path}: {img.width} {img.height}")
    if img.pixel_count() <= MAX_DUMPED_PIXELS:
        for row in range(img.height):
            cells = (img.get(row, col) for col in range(img.width))
            logger.info(" ".join(f"({p.r},{p.g},{p.b})" for p in cells))

    target = Path(args.resave) if args.resave else Path(args.path).with_name(f"{Path(args.path).stem}-test-save.png")
    if not image_service.save(img, target):
        return 1
    logger.info(f"Saved copy to {target}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
