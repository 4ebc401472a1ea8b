from __future__ import annotations

import argparse
import logging
import os
import sys

import config
import web_remote
from app import GuideApp
from catalog import CatalogError, demo_catalog, load_catalog
from catalog_builder import build_catalog


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Program guide with remote-style navigation")
    ap.add_argument("--catalog", default=config.CATALOG_PATH, help="catalog JSON to load")
    ap.add_argument("--movies", help="rebuild the catalog from chan_<n> folders first")
    ap.add_argument("--demo", action="store_true", help="use the generated demo guide")
    ap.add_argument("--windowed", action="store_true", help="run in a window")
    ap.add_argument("--start-hour", type=float, help="initial window (default: now)")
    ap.add_argument("--port", type=int, default=config.WEB_PORT, help="web remote port")
    ap.add_argument("--no-web", action="store_true", help="don't start the web remote")
    return ap.parse_args(argv)


def setup_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=getattr(logging, (level or config.LOG_LEVEL).upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
        handlers=[
            logging.StreamHandler(),
            logging.FileHandler(config.LOG_FILE, encoding="utf-8"),
        ],
    )


def load_channels(args):
    if args.movies:
        build_catalog(args.movies, args.catalog)
    if args.demo or not os.path.isfile(args.catalog):
        if not args.demo:
            logging.getLogger("main").warning("no catalog at %s – using demo guide", args.catalog)
        return demo_catalog()
    return load_catalog(args.catalog)


def main(argv=None):
    args = parse_args(argv)
    setup_logging()
    if args.windowed:
        config.FULLSCREEN = False

    try:
        channels = load_channels(args)
    except (CatalogError, OSError) as e:
        logging.getLogger("main").error("%s", e)
        sys.exit(1)

    app = GuideApp(channels, start_hour=args.start_hour)
    if config.WEB_ENABLED and not args.no_web:
        web_remote.start(app, args.port)
    app.run()


if __name__ == "__main__":
    main()
