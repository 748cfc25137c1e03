import pytest

from aitools.app import design_review as review_app
from aitools.app.design_review import DesignReviewRequest, run_design_review
from aitools.backends.results import TextResult
from aitools.framework.config import ToolConfig
from aitools.framework.errors import ConfigurationError, ValidationError

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-screenshot"


class FakeBrowser:
    def __init__(self):
        self.calls = []

    def capture(self, url, *, width, height, full_page=True, wait_ms=0):
        self.calls.append(
            {"url": url, "width": width, "height": height, "full_page": full_page, "wait_ms": wait_ms}
        )
        return PNG_BYTES


class FakeVisionAI:
    def __init__(self, text="  Increase contrast on the hero button.  "):
        self.text = text
        self.calls = []

    def review_image(self, prompt, image_bytes, *, model, mime_type="image/png"):
        self.calls.append({"prompt": prompt, "image_bytes": image_bytes, "model": model})
        return TextResult(text=self.text, model=model)


def _cfg(tmp_path) -> ToolConfig:
    cfg, _ = ToolConfig.from_dict({}, base_dir=tmp_path)
    return cfg


def _request(**overrides) -> DesignReviewRequest:
    values = dict(
        url="https://example.com",
        model="gemini-2.5-flash",
        viewport="1280x720",
        full_page=True,
        wait_ms="1500",
        prompt="Review the UI design.",
    )
    values.update(overrides)
    return DesignReviewRequest(**values)


@pytest.fixture
def gemini_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "g-test")


def test_design_review_writes_screenshot_and_review(tmp_path, gemini_key):
    browser = FakeBrowser()
    vision = FakeVisionAI()

    report = run_design_review(
        _cfg(tmp_path),
        _request(),
        browser=browser,
        client=vision,
        now=lambda: "2026-10-19T08:15:30.123Z",
    )

    screenshot = tmp_path / "screenshots" / "2026-10-19T08-15-30-123Z__screenshot.png"
    review = tmp_path / "reviews" / "2026-10-19T08-15-30-123Z__design-review.md"
    assert report.artifact_paths == [str(screenshot), str(review)]
    assert screenshot.read_bytes() == PNG_BYTES
    assert review.read_text(encoding="utf-8") == (
        "# Design Review: https://example.com/\n"
        "\n"
        "- Date: 2026-10-19T08:15:30.123Z\n"
        "- Model: gemini-2.5-flash\n"
        f"- Screenshot: {screenshot}\n"
        "\n"
        "## Feedback\n"
        "\n"
        "Increase contrast on the hero button.\n"
    )
    assert report.feedback == "Increase contrast on the hero button."
    assert browser.calls == [
        {"url": "https://example.com/", "width": 1280, "height": 720, "full_page": True, "wait_ms": 1500}
    ]
    assert vision.calls[0]["image_bytes"] == PNG_BYTES
    assert vision.calls[0]["prompt"] == "Review the UI design."


def test_empty_feedback_uses_placeholder(tmp_path, gemini_key):
    report = run_design_review(
        _cfg(tmp_path),
        _request(wait_ms="-3", full_page=False),
        browser=FakeBrowser(),
        client=FakeVisionAI(text=""),
    )

    review_text = open(report.artifact_paths[1], encoding="utf-8").read()
    assert "(no feedback returned)" in review_text
    assert report.feedback == ""


@pytest.mark.parametrize(
    "overrides",
    [
        {"url": "ftp://example.com"},
        {"url": "not a url"},
        {"url": "http://example.com:99999/"},
        {"url": "http://exa mple.com/"},
        {"viewport": "big"},
        {"viewport": "1280x"},
    ],
)
def test_invalid_input_fails_before_any_call_or_directory(tmp_path, gemini_key, overrides):
    browser = FakeBrowser()
    vision = FakeVisionAI()

    with pytest.raises(ValidationError):
        run_design_review(_cfg(tmp_path), _request(**overrides), browser=browser, client=vision)

    assert browser.calls == []
    assert vision.calls == []
    assert not (tmp_path / "screenshots").exists()
    assert not (tmp_path / "reviews").exists()


def test_missing_key_fails_first(tmp_path, monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    browser = FakeBrowser()

    with pytest.raises(ConfigurationError, match="GEMINI_API_KEY"):
        run_design_review(_cfg(tmp_path), _request(url="ftp://bad"), browser=browser, client=FakeVisionAI())

    assert browser.calls == []


def test_vision_failure_keeps_screenshot_but_writes_no_review(tmp_path, gemini_key):
    class BrokenVisionAI:
        def review_image(self, *args, **kwargs):
            raise RuntimeError("quota exceeded")

    with pytest.raises(RuntimeError, match="quota exceeded"):
        run_design_review(_cfg(tmp_path), _request(), browser=FakeBrowser(), client=BrokenVisionAI())

    assert len(list((tmp_path / "screenshots").iterdir())) == 1
    assert list((tmp_path / "reviews").iterdir()) == []


def test_default_collaborators_are_constructed(tmp_path, gemini_key, monkeypatch):
    created = {}

    class Browser(FakeBrowser):
        def __init__(self, *, logger=None):
            super().__init__()
            created["browser"] = True

    class Vision(FakeVisionAI):
        def __init__(self, api_key, *, logger=None):
            super().__init__()
            created["api_key"] = api_key

    monkeypatch.setattr(review_app, "ScreenshotBrowser", Browser)
    monkeypatch.setattr(review_app, "VisionAI", Vision)

    report = run_design_review(_cfg(tmp_path), _request())

    assert created == {"browser": True, "api_key": "g-test"}
    assert len(report.artifact_paths) == 2
