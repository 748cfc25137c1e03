import os

import pytest

from aitools.framework.config import (
    DEFAULT_REVIEW_PROMPT,
    ToolConfig,
    parse_bool,
)


def test_defaults_resolve_under_base_dir(tmp_path):
    cfg, warnings = ToolConfig.from_dict({}, base_dir=tmp_path)

    assert warnings == []
    assert cfg.base_dir == str(tmp_path)
    assert cfg.images_dir == str(tmp_path / "images")
    assert cfg.library_dir == str(tmp_path / "library")
    assert cfg.screenshots_dir == str(tmp_path / "screenshots")
    assert cfg.reviews_dir == str(tmp_path / "reviews")
    assert cfg.log_dir is None
    assert cfg.images.model == "gpt-image-1"
    assert cfg.images.count == 1
    assert cfg.research.model == "gpt-5"
    assert cfg.research.allowed_domains == ()
    assert cfg.design_review.viewport == "1280x720"
    assert cfg.design_review.full_page is True
    assert cfg.design_review.wait_ms == 1500
    assert cfg.design_review.prompt == DEFAULT_REVIEW_PROMPT


def test_values_are_parsed_strictly(tmp_path):
    cfg, _ = ToolConfig.from_dict(
        {
            "paths": {"library": "data/lib", "logs": "logs"},
            "images": {"count": "3", "label": "dog", "prompt": "dogs"},
            "research": {"offline": "yes", "allowed_domains": ["example.com", " docs.python.org "]},
            "design_review": {"full_page": 0, "wait_ms": 0},
            "logging": {"level": "debug"},
        },
        base_dir=tmp_path,
    )

    assert cfg.library_dir == str(tmp_path / "data" / "lib")
    assert cfg.log_dir == str(tmp_path / "logs")
    assert cfg.images.count == 3
    assert cfg.images.label == "dog"
    assert cfg.research.offline is True
    assert cfg.research.allowed_domains == ("example.com", "docs.python.org")
    assert cfg.design_review.full_page is False
    assert cfg.design_review.wait_ms == 0
    assert cfg.log_level == "DEBUG"


def test_absolute_paths_are_kept(tmp_path):
    elsewhere = tmp_path / "elsewhere"
    cfg, _ = ToolConfig.from_dict({"paths": {"images": str(elsewhere)}}, base_dir=tmp_path / "base")
    assert cfg.images_dir == str(elsewhere)


def test_paths_base_dir_used_when_not_injected(tmp_path):
    cfg, _ = ToolConfig.from_dict({"paths": {"base_dir": str(tmp_path)}})
    assert cfg.library_dir == str(tmp_path / "library")


def test_unknown_keys_warn_by_default(tmp_path):
    _cfg, warnings = ToolConfig.from_dict(
        {"images": {"colour": "red"}, "extra": 1},
        base_dir=tmp_path,
    )
    assert "Unknown config key: images.colour" in warnings
    assert "Unknown config key: extra" in warnings


def test_unknown_keys_strict_mode_raises(tmp_path):
    with pytest.raises(ValueError, match=r"Unknown config keys: research\.temperature"):
        ToolConfig.from_dict({"strict": True, "research": {"temperature": 1}}, base_dir=tmp_path)


@pytest.mark.parametrize(
    "cfg_dict",
    [
        {"images": {"count": 0}},
        {"images": {"count": True}},
        {"design_review": {"wait_ms": -5}},
        {"design_review": {"full_page": "sometimes"}},
        {"logging": {"level": "LOUD"}},
        {"paths": "library"},
        {"research": {"allowed_domains": [""]}},
    ],
)
def test_invalid_values_raise(tmp_path, cfg_dict):
    with pytest.raises(ValueError):
        ToolConfig.from_dict(cfg_dict, base_dir=tmp_path)


def test_parse_bool_rejects_ambiguous_strings():
    assert parse_bool("False", "x") is False
    with pytest.raises(ValueError, match="Invalid boolean for x"):
        parse_bool("maybe", "x")


def test_relative_to_base(tmp_path):
    cfg, _ = ToolConfig.from_dict({}, base_dir=tmp_path)

    assert cfg.relative_to_base(os.path.join(cfg.library_dir, "a.md")) == "library/a.md"
    outside = str(tmp_path.parent / "other" / "a.md")
    assert cfg.relative_to_base(outside) == outside
