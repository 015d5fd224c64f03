"""
Command line entry point for the FourSG site generator.

Usage:
    foursg generate /path/to/notes
    foursg generate /path/to/notes --debug
    foursg clear /path/to/notes
    foursg debug on /path/to/notes
"""

import argparse
import logging
import logging.config
import sys
from pathlib import Path

from .config import load_settings, save_settings
from .pipeline import SiteOrchestrator
from .store import LocalContentStore

logger = logging.getLogger(__name__)


def configure_logging(debug: bool = False) -> None:
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "plain": {"format": "%(asctime)s %(levelname)-7s %(name)s: %(message)s"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "plain",
                },
            },
            "loggers": {
                "foursg": {"level": "DEBUG" if debug else "INFO"},
            },
            "root": {"level": "WARNING", "handlers": ["console"]},
        }
    )


def _open_store(content_root: str) -> LocalContentStore:
    root = Path(content_root)
    if not root.is_dir():
        print(f"Error: '{content_root}' is not a valid directory.", file=sys.stderr)
        sys.exit(1)
    return LocalContentStore(root)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_generate(args) -> int:
    store = _open_store(args.content_root)
    settings = load_settings(store)
    configure_logging(args.debug or settings.debug_logging)

    report = SiteOrchestrator(store, settings, notify=print).generate_site()
    if report.ok:
        print(
            f"  {report.pages_written} page(s) written, {report.pages_failed} failed, "
            f"{report.images_copied} image(s) copied, {report.sitemap_urls} sitemap URL(s)"
        )
        return 0
    return 1


def cmd_clear(args) -> int:
    store = _open_store(args.content_root)
    configure_logging(load_settings(store).debug_logging)

    print("Clearing output directory...")
    try:
        SiteOrchestrator(store).clear_output_directory()
    except OSError as exc:
        logger.exception("Clearing output directory failed")
        print(f"Error clearing output directory: {exc}")
        return 1
    print("Output directory cleared successfully!")
    return 0


def cmd_debug(args) -> int:
    store = _open_store(args.content_root)
    settings = load_settings(store)
    settings.debug_logging = args.state == "on"
    save_settings(store, settings)
    print(f"Debug logging {'enabled' if settings.debug_logging else 'disabled'}")
    return 0


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="foursg",
        description="Build a static website from a folder of markdown notes.",
    )
    sub = ap.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate the static site.")
    gen.add_argument("content_root", help="Path to the root of the notes folder.")
    gen.add_argument("--debug", action="store_true", help="Log every processed file.")
    gen.set_defaults(func=cmd_generate)

    clear = sub.add_parser("clear", help="Delete the generated site directory.")
    clear.add_argument("content_root", help="Path to the root of the notes folder.")
    clear.set_defaults(func=cmd_clear)

    debug = sub.add_parser("debug", help="Persistently enable or disable debug logging.")
    debug.add_argument("state", choices=["on", "off"])
    debug.add_argument("content_root", help="Path to the root of the notes folder.")
    debug.set_defaults(func=cmd_debug)

    return ap


def main(argv=None) -> int:
    args = build_arg_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
