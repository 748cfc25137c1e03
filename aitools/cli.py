from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from aitools.foundation.config_io import load_config, load_env_file
from aitools.foundation.logging_utils import attach_file_log, setup_operational_logger
from aitools.framework.artifacts import timestamp_id, utc_now_iso8601
from aitools.framework.config import ToolConfig
from aitools.framework.errors import AitoolsError
from aitools.framework.validation import require_env_var

# Credential each command needs; checked before anything touches the filesystem.
_COMMAND_KEYS = {
    "images": "OPENAI_API_KEY",
    "research": "OPENAI_API_KEY",
    "design-review": "GEMINI_API_KEY",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="aitools", description="AI agent toolbelt CLI", add_help=True)
    parser.add_argument("--base-dir", default=None, help="Root for images/, library/, screenshots/, reviews/")
    parser.add_argument("--config", default=None, help="YAML config file (overrides AITOOLS_CONFIG)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    hello = sub.add_parser("hello", help="Print a friendly greeting")
    hello.add_argument("-n", "--name", default="friend", help="Name to greet")

    images = sub.add_parser("images", help="Generate images and save them to images/")
    images.add_argument("-m", "--model", default=None, help="Image model")
    images.add_argument("-s", "--size", default=None, help="Image size, e.g. 1024x1024")
    images.add_argument("-n", "--count", default=None, help="Number of images (1-10)")
    images.add_argument("--prompt", default=None, help="Prompt override")

    research = sub.add_parser("research", help="Run an OpenAI web search and save the result to library/")
    research.add_argument("query", help="Research question")
    research.add_argument("-m", "--model", default=None, help="Model for the response")
    research.add_argument(
        "--offline",
        action="store_true",
        default=None,
        help="Disable live web access (cache-only)",
    )
    research.add_argument(
        "--allow-domain",
        action="append",
        default=None,
        dest="allow_domain",
        help="Allow-list domain (repeatable)",
    )

    review = sub.add_parser(
        "design-review",
        help="Capture a website screenshot and request Gemini design feedback",
    )
    review.add_argument("url", help="Page to review (http or https)")
    review.add_argument("-m", "--model", default=None, help="Gemini model")
    review.add_argument("-v", "--viewport", default=None, help="Viewport size WIDTHxHEIGHT")
    review.add_argument(
        "--full-page",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Capture the full page (default) or only the viewport",
    )
    review.add_argument("-w", "--wait", default=None, help="Wait time before screenshot (ms)")
    review.add_argument("--prompt", default=None, help="Custom feedback prompt")
    review.add_argument("--screenshots-dir", default=None, help="Directory for screenshots")
    review.add_argument("--reviews-dir", default=None, help="Directory for feedback")

    library = sub.add_parser("library", help="List research runs recorded in library/index.json")
    library.add_argument("--search", default=None, help="Case-insensitive filter on query or id")
    library.add_argument("--limit", type=int, default=None, help="Show at most N entries")
    library.add_argument("--json", action="store_true", help="Print entries as JSON")

    return parser


def _with_dir_overrides(cfg_dict: dict, args: argparse.Namespace) -> dict:
    overrides = {
        "screenshots": getattr(args, "screenshots_dir", None),
        "reviews": getattr(args, "reviews_dir", None),
    }
    overrides = {key: value for key, value in overrides.items() if value}
    if not overrides:
        return cfg_dict
    merged = dict(cfg_dict)
    paths = dict(merged.get("paths") or {})
    paths.update(overrides)
    merged["paths"] = paths
    return merged


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)

    if args.command == "hello":
        print(f"Hello, {args.name}.")
        return 0

    load_env_file()
    cfg_dict, config_meta = load_config(config_path=args.config, base_dir=args.base_dir)
    cfg, cfg_warnings = ToolConfig.from_dict(_with_dir_overrides(cfg_dict, args), base_dir=args.base_dir)

    run_id = f"{timestamp_id(utc_now_iso8601())}_{args.command}"
    level = "DEBUG" if args.verbose else cfg.log_level
    logger, _ = setup_operational_logger(None, run_id, level=level)

    try:
        if args.command in _COMMAND_KEYS:
            require_env_var(_COMMAND_KEYS[args.command])
        if cfg.log_dir:
            attach_file_log(logger, cfg.log_dir, run_id)

        if config_meta.get("paths"):
            logger.debug("Loaded config (%s) from %s", config_meta.get("mode"), ", ".join(config_meta["paths"]))
        for warning in cfg_warnings:
            logger.warning("%s", warning)

        if args.command == "images":
            from .app.images import ImagesRequest, run_images

            report = run_images(
                cfg,
                ImagesRequest(
                    prompt=args.prompt if args.prompt is not None else cfg.images.prompt,
                    model=args.model or cfg.images.model,
                    size=args.size or cfg.images.size,
                    count=args.count if args.count is not None else cfg.images.count,
                    label=cfg.images.label,
                    default_prompt=cfg.images.prompt,
                ),
                logger=logger,
            )
            if report.message:
                print(report.message)
            for path in report.artifact_paths:
                print(f"Saved: {path}")
            return 0

        if args.command == "research":
            from .app.research import ResearchRequest, run_research

            report = run_research(
                cfg,
                ResearchRequest(
                    query=args.query,
                    model=args.model or cfg.research.model,
                    allowed_domains=tuple(args.allow_domain or cfg.research.allowed_domains),
                    offline=cfg.research.offline if args.offline is None else args.offline,
                ),
                logger=logger,
            )
            for path in report.artifact_paths:
                print(f"Saved: {path}")
            return 0

        if args.command == "design-review":
            from .app.design_review import DesignReviewRequest, run_design_review

            review_cfg = cfg.design_review
            report = run_design_review(
                cfg,
                DesignReviewRequest(
                    url=args.url,
                    model=args.model or review_cfg.model,
                    viewport=args.viewport or review_cfg.viewport,
                    full_page=review_cfg.full_page if args.full_page is None else args.full_page,
                    wait_ms=args.wait if args.wait is not None else review_cfg.wait_ms,
                    prompt=args.prompt or review_cfg.prompt,
                ),
                logger=logger,
            )
            screenshot_path, review_path = report.artifact_paths
            print(f"Saved screenshot: {screenshot_path}")
            print(f"Saved feedback: {review_path}")
            print("")
            print(report.feedback or "")
            return 0

        if args.command == "library":
            from .app.library import format_library

            print(format_library(cfg, search=args.search, limit=args.limit, as_json=args.json, logger=logger))
            return 0
    except AitoolsError as exc:
        logger.error("%s", exc)
        return exc.exit_code

    raise AssertionError(f"Unhandled command: {args.command}")


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
