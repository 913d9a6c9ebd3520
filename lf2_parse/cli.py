"""
Batch command line caller.

Usage:
    python -m lf2_parse data/*.txt            # parse every file, one line each
    python -m lf2_parse data/*.txt --jobs 4   # parse in 4 worker processes
    python -m lf2_parse broken.txt -v         # with debug logging
"""

import argparse
import logging
import sys
from concurrent.futures import ProcessPoolExecutor
from typing import List, Optional, Tuple

from . import parse_object_data
from .errors import Lf2ParseError

logger = logging.getLogger("lf2_parse")


def parse_file(path: str) -> Tuple[str, bool, str]:
    """Parse one file and return `(path, ok, summary or rendered error)`."""
    try:
        with open(path, "rb") as f:
            data = f.read()
    except OSError as e:
        return path, False, f"cannot read: {e.strerror}"

    try:
        obj = parse_object_data(data)
    except Lf2ParseError as e:
        return path, False, e.render()

    return path, True, f"{obj.name}: {len(obj.sprite_sheets)} sprite sheets, {len(obj.frames)} frames"


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="lf2_parse",
        description="Parse Little Fighter 2 object data files",
    )
    parser.add_argument(
        "files", nargs="+", metavar="FILE",
        help="Object data files (decrypted text)",
    )
    parser.add_argument(
        "--jobs", "-j", type=int, default=1,
        help="Number of worker processes (default: 1)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true",
        help="Log debug messages",
    )
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(levelname)s: %(message)s',
    )

    if args.jobs > 1 and len(args.files) > 1:
        logger.debug(f"Parsing {len(args.files)} files with {args.jobs} workers")
        with ProcessPoolExecutor(max_workers=args.jobs) as executor:
            results = list(executor.map(parse_file, args.files))
    else:
        results = [parse_file(path) for path in args.files]

    failed = 0
    for path, ok, message in results:
        print(f"{path}: {message}")
        if not ok:
            failed += 1

    if failed:
        logger.error(f"{failed} of {len(results)} files failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
