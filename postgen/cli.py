"""Command-line interface for postgen."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional

from pydantic import ValidationError

from .build import BuildContext, build_site
from .client import ContentClient
from .config import BlogConfig, load_config
from .detail import DetailAssembler
from .errors import ConfigurationError, PostgenError
from .io_utils import stable_json_dumps
from .listing import ListingAggregator

log = logging.getLogger(__name__)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load(args: argparse.Namespace) -> tuple[BlogConfig, ContentClient]:
    config = load_config(Path(args.config) if args.config else None)
    page_size = getattr(args, "page_size", None)
    if page_size is not None:
        try:
            config = BlogConfig.model_validate({**config.model_dump(), "page_size": page_size})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid --page-size {page_size}: {exc}") from exc
    return config, ContentClient.from_config(config)


def _handle_build(args: argparse.Namespace) -> None:
    config, client = _load(args)
    ctx = BuildContext(
        out_root=Path(args.out),
        config=config,
        preview_ref=args.preview_ref,
        build_label=args.build_label,
    )
    if ctx.preview:
        log.info("Building in preview mode")
    written = build_site(ctx, client, max_pages=args.max_pages)
    print(f"Built {len(written)} file(s) into {ctx.out_root}.")


def _handle_list(args: argparse.Namespace) -> None:
    config, client = _load(args)
    listing = ListingAggregator(client)
    page = listing.initialize(config.page_size)
    pages = [page]
    while args.all and page.has_next:
        page = listing.load_next(page)
        pages.append(page)
    sys.stdout.write(
        stable_json_dumps([item.model_dump(mode="json") for item in pages])
    )


def _handle_show(args: argparse.Namespace) -> None:
    _, client = _load(args)
    assembler = DetailAssembler(client)
    post = assembler.resolve_post(args.uid, args.preview_ref)
    adjacent = assembler.resolve_adjacent(post)
    payload = {
        "post": post.model_dump(mode="json"),
        "readTime": assembler.estimate_read_time(post),
        "previous": adjacent.previous.uid if adjacent.previous else None,
        "next": adjacent.next.uid if adjacent.next else None,
        "preview": args.preview_ref is not None,
    }
    sys.stdout.write(stable_json_dumps(payload))


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--config",
        default=None,
        help="Path to the blog YAML config (default: config/blog.yaml if present).",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="postgen",
        description="Static blog generation from a headless CMS",
    )
    parser.add_argument(
        "--version",
        action="version",
        version="postgen 0.1.0",
        help="Show the postgen version and exit.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output, including every API request.",
    )

    subparsers = parser.add_subparsers(dest="command")

    build_cmd = subparsers.add_parser(
        "build",
        help="Fetch posts and render the site.",
        description="Render the listing page and one page per post.",
    )
    _add_common(build_cmd)
    build_cmd.add_argument("--out", default="site", help="Directory to write rendered output.")
    build_cmd.add_argument(
        "--preview-ref",
        dest="preview_ref",
        default=None,
        help="Render draft revisions selected by this preview ref.",
    )
    build_cmd.add_argument(
        "--max-pages",
        dest="max_pages",
        type=int,
        default=None,
        help="Stop following listing cursors after this many pages.",
    )
    build_cmd.add_argument(
        "--build-label",
        dest="build_label",
        default=None,
        help="Label appended as an HTML comment to every page.",
    )
    build_cmd.set_defaults(func=_handle_build)

    list_cmd = subparsers.add_parser(
        "list",
        help="Print listing pages as JSON.",
        description="Fetch the first listing page, or every page with --all.",
    )
    _add_common(list_cmd)
    list_cmd.add_argument("--page-size", dest="page_size", type=int, default=None)
    list_cmd.add_argument("--all", action="store_true", help="Follow cursors to the last page.")
    list_cmd.set_defaults(func=_handle_list)

    show_cmd = subparsers.add_parser(
        "show",
        help="Print one post with its read time and neighbours as JSON.",
    )
    _add_common(show_cmd)
    show_cmd.add_argument("uid", help="uid of the post.")
    show_cmd.add_argument("--preview-ref", dest="preview_ref", default=None)
    show_cmd.set_defaults(func=_handle_show)

    return parser


def main(argv: Optional[Iterable[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if not hasattr(args, "func"):
        parser.print_help()
        return

    _configure_logging(args.verbose)
    try:
        args.func(args)
    except PostgenError as exc:
        raise SystemExit(f"{exc.code}: {exc}") from exc


__all__ = ["build_parser", "main"]


if __name__ == "__main__":
    main()
