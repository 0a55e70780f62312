from destill.cards import TriageCard
from destill.tui.header import Header
from destill.tui.item import Item
from destill.tui.listview import ListView
from destill.tui.panels import (
    Viewport,
    calculate_dimensions,
    render_detail,
    render_detail_panel,
    render_help_text,
    render_list_panel,
)
from destill.tui.styles import default_styles
from destill.tui.text import strip_ansi, visual_width

STYLES = default_styles()
LONG = "The quick brown fox jumps over the lazy dog again and again " * 5


def make_item(**kwargs):
    defaults = dict(
        job_name="backend-service",
        normalized_msg="Connection timeout",
        raw_message="",
        message_hash="abcdef1234567890",
        severity="HIGH",
        confidence_score=0.95,
    )
    defaults.update(kwargs)
    return Item(card=TriageCard(**defaults), rank=1, tier=1)


def widths(text):
    return [visual_width(line) for line in text.split("\n")]


def test_viewport_line_count():
    vp = Viewport(width=20, height=2)
    assert vp.total_line_count() == 0
    vp.set_content("a\nb\nc")
    assert vp.total_line_count() == 3


def test_viewport_scroll_and_view():
    vp = Viewport(width=20, height=2)
    vp.set_content("one\ntwo\nthree")
    assert vp.scroll("up") is False
    assert strip_ansi(vp.view()).split("\n")[0].strip() == "one"
    assert vp.scroll("j") is True
    lines = strip_ansi(vp.view()).split("\n")
    assert [line.strip() for line in lines] == ["two", "three"]
    assert vp.scroll("down") is False


def test_viewport_view_clipped_and_padded():
    vp = Viewport(width=10, height=4)
    vp.set_content(LONG)
    view = vp.view()
    assert len(view.split("\n")) == vp.height
    assert max(widths(view)) <= vp.width


def test_calculate_dimensions_invariants():
    header = Header("Destill Analysis")
    small = calculate_dimensions(header, 100, 30)
    large = calculate_dimensions(header, 100, 40)
    assert small.left_panel_width + small.right_panel_width == 100
    assert small.left_panel_width < small.right_panel_width
    assert large.available_height - small.available_height == 10


def test_render_detail_sections_and_width():
    item = make_item(raw_message=LONG, pre_context=[LONG, ""], post_context=[LONG])
    text = render_detail(item, 58, STYLES)
    plain = strip_ansi(text)
    assert "Pre-Context:" in plain
    assert "ERROR:" in plain
    assert "Post-Context:" in plain
    assert max(widths(text)) <= 58


def test_render_detail_falls_back_and_truncates_hash():
    item = make_item()
    plain = strip_ansi(render_detail(item, 80, STYLES))
    assert "Connection timeout" in plain
    assert "Pre-Context:" not in plain
    assert "abcdef123456" in plain
    assert "abcdef1234567" not in plain


def test_render_detail_panel_with_item_fits_width():
    item = make_item(pre_context=[LONG])
    vp = Viewport(width=58, height=20)
    vp.set_content(render_detail(item, 56, STYLES))
    panel = render_detail_panel(item, vp, 60, 21, STYLES, False)
    assert "Job: backend-service" in strip_ansi(panel)
    assert max(widths(panel)) <= 60


def test_render_detail_panel_empty_state():
    panel = render_detail_panel(None, Viewport(), 60, 10, STYLES, False)
    assert "← Navigate list to view details" in strip_ansi(panel)


def test_render_list_panel_headers_and_width():
    view = ListView()
    view.set_size(38, 10)
    view.set_items([make_item(raw_message=LONG)])
    panel = render_list_panel(view, 40, 10, STYLES)
    plain = strip_ansi(panel)
    assert "Conf" in plain
    assert "Message" in plain
    assert max(widths(panel)) <= 40


def test_help_text_depends_on_focus():
    focused = strip_ansi(render_help_text(STYLES, True))
    unfocused = strip_ansi(render_help_text(STYLES, False))
    assert "Scroll" in focused
    assert "All/Unique/Noise" not in focused
    assert "All/Unique/Noise" in unfocused