"""Render the listing and post pages into a static site."""

from __future__ import annotations

import logging
import shutil
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from markupsafe import Markup

from .config import BlogConfig
from .detail import DetailAssembler, DetailSource
from .io_utils import ensure_dir, write_json_stable
from .listing import ListingAggregator, accumulate
from .models import Adjacent, PagedResult, Post
from .richtext import as_html
from .routing import PageSpec, SiteRouter, relative_href
from .shared_gen import generate_load_more_js

log = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).parent
MONTH_NAMES = tuple(datetime(2000, month, 1).strftime("%b") for month in range(1, 13))


@dataclass
class BuildContext:
    """Configuration for one build of the blog."""

    out_root: Path
    config: BlogConfig = field(default_factory=BlogConfig)
    preview_ref: str | None = None
    templates_dir: Path = PACKAGE_DIR / "templates"
    assets_dir: Path = PACKAGE_DIR / "assets"
    build_label: str | None = None

    @property
    def preview(self) -> bool:
        return self.preview_ref is not None

    @property
    def shared_dir(self) -> Path:
        return self.out_root / "shared"

    def format_date(self, value: Optional[datetime], fmt: str | None = None) -> str:
        """Format ``value`` with strftime; ``%-d`` is the day without padding."""

        if value is None:
            return ""
        fmt = (fmt or self.config.date_format).replace("%-d", str(value.day))
        return value.strftime(fmt)

    def jinja_env(self) -> Environment:
        """Create the Jinja environment used for every page."""

        env = Environment(
            loader=FileSystemLoader([self.templates_dir]),
            autoescape=select_autoescape(["html", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        env.filters["rich_text"] = lambda blocks: Markup(as_html(blocks))
        return env

    def copy_assets(self) -> List[Path]:
        """Copy static assets into ``shared/`` and return the written paths."""

        written: List[Path] = []
        if not self.assets_dir.exists():
            return written
        destination = ensure_dir(self.shared_dir)
        for asset_path in sorted(self.assets_dir.rglob("*")):
            if asset_path.is_dir():
                continue
            target = destination / asset_path.relative_to(self.assets_dir)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(asset_path, target)
            written.append(target)
        return written


def _page_chrome(ctx: BuildContext, base: Path) -> dict:
    """Keys every template expects, relative to the page directory ``base``."""

    return {
        "title": ctx.config.site_title,
        "css_href": relative_href(ctx.shared_dir / "common.css", base),
        "preview": ctx.preview,
        "exit_preview_href": ctx.config.exit_preview_href,
    }


def _summary(ctx: BuildContext, router: SiteRouter, post: Post, base: Path) -> dict:
    published = post.first_publication_date
    return {
        "uid": post.uid,
        "href": router.href_for_post(post.uid, base),
        "title": post.title,
        "subtitle": post.subtitle,
        "author": post.author,
        "date": ctx.format_date(published, ctx.config.listing_date_format),
        "datetime": published.isoformat() if published else "",
    }


def build_listing_view_model(
    ctx: BuildContext, router: SiteRouter, page: PagedResult, *, base: Path
) -> dict:
    """Assemble the listing template data.

    ``page`` is the first listing page; its cursor drives the load-more button.
    """

    return {
        "site": _page_chrome(ctx, base),
        "posts": [_summary(ctx, router, post, base) for post in page.results],
        "next_page": page.next_page or "",
        "post_href_prefix": relative_href(router.out_root / "post", base) + "/",
        "date_format": ctx.config.listing_date_format,
        "month_names": ",".join(MONTH_NAMES),
        "load_more_js_href": relative_href(ctx.shared_dir / "load-more.js", base),
    }


def _nav_link(router: SiteRouter, post: Post | None, base: Path) -> dict | None:
    if post is None:
        return None
    return {"href": router.href_for_post(post.uid, base), "title": post.title}


def build_post_view_model(
    ctx: BuildContext,
    router: SiteRouter,
    post: Post,
    *,
    read_time: int,
    adjacent: Adjacent,
    base: Path,
) -> dict:
    comments = ctx.config.comments
    edited = post.was_edited
    return {
        "site": _page_chrome(ctx, base),
        "home_href": router.href_for_page(router.home(), base),
        "post": {
            "uid": post.uid,
            "title": post.title,
            "subtitle": post.subtitle,
            "author": post.author,
            "banner_url": post.banner.url,
            "date": ctx.format_date(post.first_publication_date),
            "datetime": post.first_publication_date.isoformat() if post.first_publication_date else "",
            "edited_at": (
                ctx.format_date(post.last_publication_date, ctx.config.datetime_format) if edited else ""
            ),
            "read_time": read_time,
            "sections": [{"heading": section.heading, "body": section.body} for section in post.content],
        },
        "navigation": {
            "previous": _nav_link(router, adjacent.previous, base),
            "next": _nav_link(router, adjacent.next, base),
        },
        "comments": {
            "enabled": comments.active,
            "src": comments.script_src,
            "repo": comments.repo,
            "issue_term": comments.issue_term,
            "theme": comments.theme,
        },
    }


def _render(ctx: BuildContext, spec: PageSpec, view_model: dict) -> Path:
    template = ctx.jinja_env().get_template(spec.template)
    rendered = template.render(view_model=view_model)
    if ctx.build_label:
        rendered += f"\n<!-- postgen build: {ctx.build_label} -->\n"
    ensure_dir(spec.out_file.parent)
    spec.out_file.write_text(rendered, encoding="utf-8")
    log.debug("Wrote %s", spec.out_file)
    return spec.out_file


def build_home(ctx: BuildContext, router: SiteRouter, page: PagedResult) -> List[Path]:
    """Render the listing page for the first page of posts."""

    spec = router.home()
    view_model = build_listing_view_model(ctx, router, page, base=spec.out_file.parent)
    return [_render(ctx, spec, view_model)]


def build_post(
    ctx: BuildContext,
    router: SiteRouter,
    post: Post,
    *,
    read_time: int,
    adjacent: Adjacent,
) -> List[Path]:
    """Render the page of a single post."""

    spec = router.add_post(post.uid)
    view_model = build_post_view_model(
        ctx, router, post, read_time=read_time, adjacent=adjacent, base=spec.out_file.parent
    )
    return [_render(ctx, spec, view_model)]


def collect_listing(
    aggregator: ListingAggregator, page_size: int, *, max_pages: int | None = None
) -> tuple[PagedResult, tuple[Post, ...]]:
    """Fetch the first page and follow cursors, accumulating posts in order.

    Returns the first page (for the listing) and every post fetched.
    """

    first = aggregator.initialize(page_size)
    pages = [first]
    current = first
    while current.has_next and (max_pages is None or len(pages) < max_pages):
        current = aggregator.load_next(current)
        pages.append(current)
    log.info("Fetched %d listing page(s)", len(pages))
    return first, accumulate(pages)


def build_site(
    ctx: BuildContext, client: DetailSource, *, max_pages: int | None = None
) -> List[Path]:
    """Fetch every post and render the whole site into ``ctx.out_root``."""

    listing = ListingAggregator(client)
    assembler = DetailAssembler(client)

    first_page, summaries = collect_listing(listing, ctx.config.page_size, max_pages=max_pages)
    router = SiteRouter(ctx.out_root, summaries)

    written: List[Path] = []
    written.extend(ctx.copy_assets())
    written.append(generate_load_more_js(ctx.out_root))
    written.extend(build_home(ctx, router, first_page))

    for summary in summaries:
        post = assembler.resolve_post(summary.uid, ctx.preview_ref)
        adjacent = assembler.resolve_adjacent(post)
        written.extend(
            build_post(
                ctx,
                router,
                post,
                read_time=assembler.estimate_read_time(post),
                adjacent=adjacent,
            )
        )
        log.info("Rendered post %s", post.uid)

    written.append(write_json_stable(ctx.out_root / "posts.json", router.routes_payload()))
    return written


__all__ = [
    "BuildContext",
    "build_home",
    "build_listing_view_model",
    "build_post",
    "build_post_view_model",
    "build_site",
    "collect_listing",
]
