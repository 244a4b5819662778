"""
SplitGet - Parallel range-aware HTTP/1.0 downloader
Command line entry point
"""

import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from tqdm import tqdm

from split_get.config import DownloadConfig
from split_get.engine import DownloadEngine
from split_get.errors import SplitGetError
from split_get.server import RangeFileServer
from split_get.utils import format_bytes, get_default_filename, parse_size

logger = logging.getLogger("split_get")

NOISY_LOGGERS = ["aiohttp.access", "aiohttp.server", "asyncio"]


def setup_logging(debug: bool = False, quiet: bool = False):
    level = logging.DEBUG if debug else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
                        datefmt="%H:%M:%S")
    if not debug:
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="split-get", description="Parallel range-aware HTTP/1.0 downloader")
    parser.add_argument('-d', '--debug', action='store_true', help='enable debug logging')
    parser.add_argument('-q', '--quiet', action='store_true', help='only log warnings and errors')
    subparsers = parser.add_subparsers(dest='command', required=True)

    get = subparsers.add_parser('get', help='download host/path to a file')
    get.add_argument('url', help='target URL in host/path form, e.g. example.com/file.bin')
    get.add_argument('-o', '--output', help='output file (default: last path segment)')
    get.add_argument('-n', '--workers', type=int, help='concurrent connections')
    get.add_argument('-c', '--chunk-size', type=parse_size, help='max bytes per chunk, e.g. 512K or 4M')
    get.add_argument('-p', '--port', type=int, help='server port (default 80)')
    get.add_argument('--retries', type=int, help='attempts per chunk')
    get.add_argument('--timeout', type=float, help='connect and read timeout in seconds')
    get.add_argument('--user-agent', help='send a User-Agent header')
    get.add_argument('--no-progress', action='store_true', help='disable the progress bar')

    serve = subparsers.add_parser('serve', help='serve a directory with Range support')
    serve.add_argument('directory', help='directory to serve')
    serve.add_argument('--host', default='127.0.0.1')
    serve.add_argument('--port', type=int, default=8080)
    serve.add_argument('--ignore-range', action='store_true', help='always send the whole file with 200')
    return parser


def config_from_args(args: argparse.Namespace) -> DownloadConfig:
    """Environment defaults, overridden by whatever flags were given."""
    config = DownloadConfig.from_env()
    if args.workers is not None:
        config.num_workers = args.workers
    if args.chunk_size is not None:
        config.max_chunk_size = args.chunk_size
    if args.port is not None:
        config.port = args.port
    if args.retries is not None:
        config.max_retries = args.retries
    if args.timeout is not None:
        config.connect_timeout = args.timeout
        config.read_timeout = args.timeout
    if args.user_agent:
        config.user_agent = args.user_agent
    config.validate()
    return config


def run_download(args: argparse.Namespace) -> int:
    config = config_from_args(args)
    output_path = Path(args.output or get_default_filename(args.url))
    engine = DownloadEngine(args.url, config=config)

    progress: Optional[tqdm] = None
    if not args.no_progress:
        progress = tqdm(unit='B', unit_scale=True, unit_divisor=1024, desc=output_path.name)

        def on_progress(downloaded: int, total: Optional[int]):
            if total is not None and progress.total != total:
                progress.total = total
            progress.update(downloaded - progress.n)

        engine.progress_callback = on_progress

    start_time = time.time()
    try:
        result = asyncio.run(engine.run())
    finally:
        if progress is not None:
            progress.close()

    output_path.write_bytes(result.payload)
    elapsed = time.time() - start_time
    mode = f"{len(result.chunks)} chunk(s)" if result.ranged else "single request"
    print(f"Saved {format_bytes(len(result.payload))} to {output_path} ({mode}) in {elapsed:.2f}s")
    return 0


def run_server(args: argparse.Namespace) -> int:
    server = RangeFileServer(args.directory, host=args.host, port=args.port, ignore_range=args.ignore_range)
    try:
        asyncio.run(server.serve_forever())
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down.")
    return 0


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(args.debug, args.quiet)
    try:
        if args.command == 'serve':
            return run_server(args)
        return run_download(args)
    except SplitGetError as e:
        logger.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
