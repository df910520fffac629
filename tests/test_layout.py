# tests/test_layout.py
import pytest

from storybook.lib.catalog import StoryTemplate
from storybook.lib.layout import LayoutSettings, place_lines, plan_pages, wrap_text

TEXT = (
    "One sunny morning the child found a paintbrush glowing at the bottom of the toy box "
    "and whatever was painted with it came to life right there on the kitchen table"
)


@pytest.mark.parametrize("limit", [10, 20, 50, 200])
def test_wrap_respects_limit_and_keeps_words(limit):
    lines = wrap_text(TEXT, limit)
    assert " ".join(lines) == TEXT
    assert all(len(line) <= limit for line in lines)


def test_wrap_is_greedy():
    assert wrap_text("aa bb cc dd", 5) == ["aa bb", "cc dd"]
    assert wrap_text("aa bb cc dd", 4) == ["aa", "bb", "cc", "dd"]


def test_long_word_sits_alone():
    lines = wrap_text("a supercalifragilistic b", 10)
    assert lines == ["a", "supercalifragilistic", "b"]


def test_long_first_word_does_not_emit_empty_line():
    assert wrap_text("supercalifragilistic b", 5) == ["supercalifragilistic", "b"]


def test_whitespace_is_normalized():
    assert wrap_text("  hello \n  world  ", 50) == ["hello world"]
    assert wrap_text("", 50) == []


def test_place_lines_truncates_below_bottom_margin():
    lines = [f"line {i}" for i in range(10)]
    kept, ys, truncated = place_lines(lines, start_y=100, line_height=14, bottom_margin=50)
    assert kept == tuple(lines[:4])
    assert ys == (100, 86, 72, 58)
    assert truncated


def test_place_lines_fits():
    kept, ys, truncated = place_lines(["a", "b"], start_y=100, line_height=14, bottom_margin=50)
    assert kept == ("a", "b")
    assert not truncated


def _template(pages=3, content=("Page one for {name}.", "Page two.", "Page three.")):
    return StoryTemplate(title="{name} and the Magic Paintbrush", content=list(content), pages=pages)


def test_plan_geometry_for_landscape_photo():
    settings = LayoutSettings()
    plans = plan_pages(_template(), "Sam", 640, 480, settings)
    first, second = plans[0].layout, plans[1].layout

    assert first.image_width == pytest.approx(240)
    assert first.image_height == pytest.approx(180)
    assert first.image_x == pytest.approx(80)
    assert first.image_y == pytest.approx(400)

    # title below the photo on page 1 only; text below the title
    assert plans[0].title_lines == ("Sam and the Magic Paintbrush",)
    assert plans[0].title_ys == (pytest.approx(360),)
    assert first.text_start_y == pytest.approx(340)
    assert plans[1].title_lines == ()
    assert plans[1].title is None
    assert second.text_start_y == pytest.approx(370)
    assert second.line_height == 14


def test_plan_text_and_footers():
    plans = plan_pages(_template(), "Sam", 100, 100, LayoutSettings())
    assert [p.footer for p in plans] == ["Page 1 of 3", "Page 2 of 3", "Page 3 of 3"]
    assert plans[0].lines == ("Page one for Sam.",)
    assert plans[2].lines == ("Page three.",)
    assert all(not p.truncated for p in plans)


def test_plan_reuses_first_paragraph_when_content_is_short():
    plans = plan_pages(_template(pages=4, content=["Only one paragraph."]), "Sam", 100, 100, LayoutSettings())
    assert len(plans) == 4
    assert all(p.lines == ("Only one paragraph.",) for p in plans)


def test_long_title_wraps_and_pushes_text_down():
    t = StoryTemplate(title="{name} and the Map of Forgotten Stars", content=["x"], pages=1)
    settings = LayoutSettings()
    plan = plan_pages(t, "Bartholomew Alexander", 640, 480, settings)[0]
    assert len(plan.title_lines) > 1
    assert plan.title == "Bartholomew Alexander and the Map of Forgotten Stars"
    assert plan.layout.text_start_y == pytest.approx(plan.title_ys[-1] - settings.text_gap_after_title)


def test_overflowing_text_is_truncated_at_bottom_margin():
    settings = LayoutSettings(page_height=400, bottom_margin=50)
    long_text = " ".join(["word"] * 400)
    plan = plan_pages(_template(pages=1, content=[long_text]), "Sam", 640, 480, settings)[0]
    assert plan.truncated
    assert min(plan.line_ys) >= settings.bottom_margin
    # kept lines are a prefix of the wrapped paragraph
    assert long_text.startswith(" ".join(plan.lines))
    assert all(len(line) <= settings.max_line_length for line in plan.lines)


def test_planning_is_deterministic():
    t = _template()
    assert plan_pages(t, "Sam", 640, 480, LayoutSettings()) == plan_pages(t, "Sam", 640, 480, LayoutSettings())
