import argparse
import json
import logging
import sys
from pathlib import Path

from framescan.mp3_parser import MP3Stream

from .config import Config, ConfigError

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NO_FRAMES = 1
EXIT_UNREADABLE = 2

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="framescan", description="Count MPEG-1 Layer III frames in MP3 files.")
    p.add_argument("files", nargs="+", help="MP3 file(s) to scan")
    p.add_argument("--stats", action="store_true", help="Also report padded frames, duration and early halt")
    p.add_argument("--json", action="store_true", help="Print one JSON object per file")
    p.add_argument("--config", default=None, help="Path to framescan.toml")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p

def _format_line(path: str, st: dict, with_stats: bool) -> str:
    line = f"{path}: {st['total_frames']} frames"
    if with_stats:
        line += (f", {st['padded_frames']} padded, {st['duration_sec']:.2f} s"
                 + (", halted on reserved header" if st["halted"] else ""))
    return line

def scan_file(path: str) -> dict:
    data = Path(path).read_bytes()
    st = MP3Stream(data).stats()
    logger.debug(f"Scanned {path}: {len(data)} bytes, {st['total_frames']} frames")
    return st

def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    try:
        cfg = Config.load(args.config)
    except ConfigError as e:
        print(f"Config error: {e}", file=sys.stderr)
        return EXIT_UNREADABLE
    if not args.verbose:
        logging.getLogger().setLevel(cfg.log_level)

    status = EXIT_OK
    for path in args.files:
        try:
            st = scan_file(path)
        except OSError as e:
            print(f"{path}: cannot read file ({e})", file=sys.stderr)
            status = EXIT_UNREADABLE
            continue

        if args.json:
            out = {"file": path, "frameCount": st["total_frames"]}
            if args.stats:
                out.update(paddedFrames=st["padded_frames"], durationSec=st["duration_sec"], halted=st["halted"])
            print(json.dumps(out))
        else:
            print(_format_line(path, st, args.stats))

        if st["total_frames"] == 0 and status == EXIT_OK:
            status = EXIT_NO_FRAMES
    return status

if __name__ == "__main__":
    sys.exit(main())
