"""Lyrical Glasses — entry point."""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from lyrical.app import LyricsApp
from lyrical.cache import LyricsCache
from lyrical.config import LOG_LEVEL, LYRICS_PORT
from lyrical.preflight import run_preflight
from lyrical.timecode import parse_timecode
from lyrical.ui import console, print_header


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="glasses", description="Identify a song and follow its lyrics.")
    sub = parser.add_subparsers(dest="command")

    listen = sub.add_parser("listen", help="record, identify and follow lyrics")
    listen.add_argument("--file", type=Path, help="identify this audio file instead of recording")
    listen.add_argument("--offset", help="start position override, e.g. 01:23")
    listen.add_argument("--skip-preflight", action="store_true")

    sync = sub.add_parser("sync", help="follow a local .lrc file")
    sync.add_argument("lrc", type=Path)
    sync.add_argument("--offset", default="00:00", help="start position, e.g. 00:42")

    serve = sub.add_parser("serve", help="run the lyrics fetch service")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=LYRICS_PORT)

    bundle = sub.add_parser("bundle", help="export cached lyrics into one JSON file")
    bundle.add_argument("--out", type=Path)

    return parser


async def _listen(args) -> int:
    print_header()
    if not args.skip_preflight:
        ok = await run_preflight(need_recorder=args.file is None)
        if not ok:
            return 1

    offset = parse_timecode(args.offset) if args.offset else None
    return await LyricsApp().listen(audio_file=args.file, offset=offset)


async def _sync(args) -> int:
    print_header()
    return await LyricsApp().play_file(args.lrc, offset=parse_timecode(args.offset))


def _serve(args) -> int:
    import uvicorn

    from lyrical.web.server import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port, log_level=LOG_LEVEL.lower())
    return 0


def _bundle(args) -> int:
    path = LyricsCache().bundle(args.out)
    console.print(f"  [green]✓ Lyrics bundle written:[/green] {path}")
    return 0


def main(argv=None) -> int:
    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    args = _build_parser().parse_args(argv)
    if args.command is None:
        args = _build_parser().parse_args(["listen"])

    try:
        if args.command == "serve":
            return _serve(args)
        if args.command == "bundle":
            return _bundle(args)
        if args.command == "sync":
            return asyncio.run(_sync(args))
        return asyncio.run(_listen(args))
    except KeyboardInterrupt:
        console.print("\n\n  [bold]Stopped.[/bold] Goodbye.\n")
        return 0


if __name__ == "__main__":
    sys.exit(main())
