from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Mapping

DEFAULT_IMAGES_DIR = "images"
DEFAULT_LIBRARY_DIR = "library"
DEFAULT_SCREENSHOTS_DIR = "screenshots"
DEFAULT_REVIEWS_DIR = "reviews"

DEFAULT_IMAGE_MODEL = "gpt-image-1"
DEFAULT_IMAGE_SIZE = "1024x1024"
DEFAULT_IMAGE_PROMPT = "cats"
DEFAULT_IMAGE_LABEL = "cat"

DEFAULT_RESEARCH_MODEL = "gpt-5"

DEFAULT_REVIEW_MODEL = "gemini-2.5-flash"
DEFAULT_VIEWPORT = "1280x720"
DEFAULT_WAIT_MS = 1500
DEFAULT_REVIEW_PROMPT = (
    "Review the UI design. Focus on hierarchy, typography, color, layout, and accessibility. "
    "Provide concise, actionable feedback."
)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def parse_bool(value: Any, path: str) -> bool:
    """
    Strict boolean parsing to avoid bool('false') footguns.

    Accepts True/False, 0/1 and the strings true/false/1/0/yes/no
    (case-insensitive). Raises ValueError naming the config key otherwise.
    """

    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"Invalid boolean for {path}: {value!r}")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"true", "1", "yes"}:
            return True
        if normalized in {"false", "0", "no"}:
            return False
        raise ValueError(f"Invalid boolean for {path}: {value!r}")

    raise ValueError(f"Invalid boolean for {path}: {value!r}")


def parse_int(value: Any, path: str) -> int:
    if value is None:
        raise ValueError(f"Invalid config value for {path}: None")
    if isinstance(value, bool):
        raise ValueError(f"Invalid config type for {path}: expected int, got bool")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if not value.strip():
            raise ValueError(f"Invalid config value for {path}: must be an int")
        try:
            return int(value.strip())
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Invalid config value for {path}: must be an int") from exc
    raise ValueError(f"Invalid config type for {path}: expected int")


def parse_str(value: Any, path: str, *, default: str) -> str:
    if value is None:
        return default
    if not isinstance(value, str):
        raise ValueError(f"Invalid config type for {path}: expected string")
    text = value.strip()
    if not text:
        raise ValueError(f"Invalid config value for {path}: must be a non-empty string")
    return text


def parse_str_list(value: Any, path: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"Invalid config type for {path}: expected list of strings")
    items: list[str] = []
    for idx, item in enumerate(value):
        if not isinstance(item, str) or not item.strip():
            raise ValueError(f"Invalid config value for {path}[{idx}]: must be a non-empty string")
        items.append(item.strip())
    return tuple(items)


@dataclass(frozen=True)
class ImagesConfig:
    model: str = DEFAULT_IMAGE_MODEL
    size: str = DEFAULT_IMAGE_SIZE
    count: int = 1
    prompt: str = DEFAULT_IMAGE_PROMPT
    label: str = DEFAULT_IMAGE_LABEL


@dataclass(frozen=True)
class ResearchConfig:
    model: str = DEFAULT_RESEARCH_MODEL
    allowed_domains: tuple[str, ...] = ()
    offline: bool = False


@dataclass(frozen=True)
class DesignReviewConfig:
    model: str = DEFAULT_REVIEW_MODEL
    viewport: str = DEFAULT_VIEWPORT
    full_page: bool = True
    wait_ms: int = DEFAULT_WAIT_MS
    prompt: str = DEFAULT_REVIEW_PROMPT


@dataclass(frozen=True)
class ToolConfig:
    """Resolved settings; every directory is absolute and rooted at `base_dir`."""

    base_dir: str
    images_dir: str
    library_dir: str
    screenshots_dir: str
    reviews_dir: str
    log_dir: str | None
    log_level: str
    images: ImagesConfig
    research: ResearchConfig
    design_review: DesignReviewConfig

    def relative_to_base(self, path: str) -> str:
        """POSIX path relative to `base_dir`, or the absolute path when it lives elsewhere."""
        absolute = os.path.abspath(path)
        try:
            rel = os.path.relpath(absolute, self.base_dir)
        except ValueError:
            return absolute
        if rel == os.pardir or rel.startswith(os.pardir + os.sep):
            return absolute
        return rel.replace(os.sep, "/")

    @staticmethod
    def from_dict(
        cfg: Mapping[str, Any],
        *,
        base_dir: str | os.PathLike[str] | None = None,
    ) -> tuple["ToolConfig", list[str]]:
        """
        Parse and validate configuration, returning (ToolConfig, warnings).

        `base_dir` (normally the CLI's --base-dir or the working directory)
        wins over `paths.base_dir`.

        Raises:
            ValueError: if values are invalid, or unknown keys appear with `strict: true`.
        """

        if not isinstance(cfg, Mapping):
            raise ValueError("Config must be a mapping")

        warnings: list[str] = []

        strict_unknown_keys = False
        if "strict" in cfg:
            strict_unknown_keys = parse_bool(cfg.get("strict"), "strict")

        schema: Mapping[str, Any] = {
            "strict": None,
            "paths": {
                "base_dir": None,
                "images": None,
                "library": None,
                "screenshots": None,
                "reviews": None,
                "logs": None,
            },
            "images": {"model": None, "size": None, "count": None, "prompt": None, "label": None},
            "research": {"model": None, "allowed_domains": None, "offline": None},
            "design_review": {
                "model": None,
                "viewport": None,
                "full_page": None,
                "wait_ms": None,
                "prompt": None,
            },
            "logging": {"level": None},
        }

        def collect_unknown_keys(mapping: Any, subschema: Mapping[str, Any], *, prefix: str) -> list[str]:
            if not isinstance(mapping, Mapping):
                return []
            unknown: list[str] = []
            for key, value in mapping.items():
                if not isinstance(key, str):
                    continue
                path = f"{prefix}.{key}" if prefix else key
                if key not in subschema:
                    unknown.append(path)
                    continue
                nested = subschema.get(key)
                if isinstance(nested, Mapping):
                    unknown.extend(collect_unknown_keys(value, nested, prefix=path))
            return unknown

        unknown_keys = collect_unknown_keys(cfg, schema, prefix="")
        if unknown_keys:
            if strict_unknown_keys:
                raise ValueError(f"Unknown config keys: {', '.join(unknown_keys)}")
            warnings.extend(f"Unknown config key: {key}" for key in unknown_keys)

        def section(name: str) -> Mapping[str, Any]:
            value = cfg.get(name)
            if value is None:
                return {}
            if not isinstance(value, Mapping):
                raise ValueError(f"Invalid config type for {name}: expected mapping")
            return value

        paths_cfg = section("paths")
        images_cfg = section("images")
        research_cfg = section("research")
        review_cfg = section("design_review")
        logging_cfg = section("logging")

        if base_dir is not None:
            root = os.path.abspath(os.fspath(base_dir))
        elif paths_cfg.get("base_dir") is not None:
            raw = parse_str(paths_cfg.get("base_dir"), "paths.base_dir", default=".")
            root = os.path.abspath(os.path.expandvars(os.path.expanduser(raw)))
        else:
            root = os.getcwd()

        def resolve_dir(key: str, default: str | None) -> str | None:
            raw = paths_cfg.get(key)
            if raw is None:
                if default is None:
                    return None
                raw = default
            text = parse_str(raw, f"paths.{key}", default=default or "")
            expanded = os.path.expandvars(os.path.expanduser(text))
            return os.path.abspath(os.path.join(root, expanded))

        count = 1
        if images_cfg.get("count") is not None:
            count = parse_int(images_cfg.get("count"), "images.count")
            if count < 1:
                raise ValueError("Invalid config value for images.count: must be >= 1")

        wait_ms = DEFAULT_WAIT_MS
        if review_cfg.get("wait_ms") is not None:
            wait_ms = parse_int(review_cfg.get("wait_ms"), "design_review.wait_ms")
            if wait_ms < 0:
                raise ValueError("Invalid config value for design_review.wait_ms: must be >= 0")

        log_level = parse_str(logging_cfg.get("level"), "logging.level", default="INFO").upper()
        if log_level not in _LOG_LEVELS:
            raise ValueError(f"Invalid config value for logging.level: {log_level!r}")

        tool_cfg = ToolConfig(
            base_dir=root,
            images_dir=resolve_dir("images", DEFAULT_IMAGES_DIR),  # type: ignore[arg-type]
            library_dir=resolve_dir("library", DEFAULT_LIBRARY_DIR),  # type: ignore[arg-type]
            screenshots_dir=resolve_dir("screenshots", DEFAULT_SCREENSHOTS_DIR),  # type: ignore[arg-type]
            reviews_dir=resolve_dir("reviews", DEFAULT_REVIEWS_DIR),  # type: ignore[arg-type]
            log_dir=resolve_dir("logs", None),
            log_level=log_level,
            images=ImagesConfig(
                model=parse_str(images_cfg.get("model"), "images.model", default=DEFAULT_IMAGE_MODEL),
                size=parse_str(images_cfg.get("size"), "images.size", default=DEFAULT_IMAGE_SIZE),
                count=count,
                prompt=parse_str(images_cfg.get("prompt"), "images.prompt", default=DEFAULT_IMAGE_PROMPT),
                label=parse_str(images_cfg.get("label"), "images.label", default=DEFAULT_IMAGE_LABEL),
            ),
            research=ResearchConfig(
                model=parse_str(research_cfg.get("model"), "research.model", default=DEFAULT_RESEARCH_MODEL),
                allowed_domains=parse_str_list(
                    research_cfg.get("allowed_domains"), "research.allowed_domains"
                ),
                offline=(
                    parse_bool(research_cfg.get("offline"), "research.offline")
                    if research_cfg.get("offline") is not None
                    else False
                ),
            ),
            design_review=DesignReviewConfig(
                model=parse_str(review_cfg.get("model"), "design_review.model", default=DEFAULT_REVIEW_MODEL),
                viewport=parse_str(review_cfg.get("viewport"), "design_review.viewport", default=DEFAULT_VIEWPORT),
                full_page=(
                    parse_bool(review_cfg.get("full_page"), "design_review.full_page")
                    if review_cfg.get("full_page") is not None
                    else True
                ),
                wait_ms=wait_ms,
                prompt=parse_str(review_cfg.get("prompt"), "design_review.prompt", default=DEFAULT_REVIEW_PROMPT),
            ),
        )
        return tool_cfg, warnings
