import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .converter import png_to_qoi, qoi_to_png
from .errors import QOIError
from .header import read_header

logger = logging.getLogger(__name__)


def setup_logging(log_file: Optional[Path], verbose: bool = False) -> None:
    log_fmt = "[%(asctime)s] %(levelname)s: %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    level = logging.DEBUG if verbose else logging.INFO
    handlers = [logging.StreamHandler(sys.stderr)]
    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file, encoding="utf-8"))
    logging.basicConfig(
        level=level, format=log_fmt, datefmt=datefmt, handlers=handlers, force=True
    )


def parse_args(argv=None):
    p = argparse.ArgumentParser(prog="qoicodec", description="QOI image encoder / decoder")
    p.add_argument("--log-file", default=None)
    p.add_argument("--verbose", action="store_true")
    sub = p.add_subparsers(dest="command", required=True)

    enc = sub.add_parser("encode", help="Image (PNG, JPEG, RAW...) -> .qoi")
    enc.add_argument("src")
    enc.add_argument("dst")
    enc.add_argument("--colorspace", type=int, choices=(0, 1), default=0,
                     help="0 = sRGB with linear alpha, 1 = all channels linear")

    dec = sub.add_parser("decode", help=".qoi -> PNG (or any format Pillow can write)")
    dec.add_argument("src")
    dec.add_argument("dst")

    info = sub.add_parser("info", help="Print the header of a .qoi file")
    info.add_argument("src")
    return p.parse_args(argv)


def print_info(src: Path) -> None:
    data = src.read_bytes()
    header = read_header(data)
    raw_size = header.pixel_count * header.channels
    print(f"{src}: {header.width}x{header.height}")
    print(f"  channels:   {header.channels}")
    print(f"  colorspace: {'linear' if header.colorspace else 'sRGB'}")
    print(f"  size:       {len(data)} bytes ({len(data) / raw_size:.1%} of raw {raw_size} bytes)")


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, verbose=args.verbose)

    try:
        if args.command == "encode":
            png_to_qoi(args.src, args.dst, colorspace=args.colorspace)
        elif args.command == "decode":
            qoi_to_png(args.src, args.dst)
        else:
            print_info(Path(args.src))
    except (QOIError, OSError) as e:
        logger.error("%s failed for %s: %s", args.command, args.src, e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
