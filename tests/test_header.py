from destill.tui.header import Header, JobInfo
from destill.tui.item import LoadStatus
from destill.tui.text import strip_ansi, visual_width


def _header(*names):
    return Header("Destill Analysis", [JobInfo(name) for name in names])


def test_new_header_starts_on_all():
    header = _header("a", "b")
    assert header.filter == "ALL"
    assert header.filter_index == 0
    assert "[0/2]" in header.selected_filter


def test_cycle_filter_walks_jobs_and_wraps():
    header = _header("a", "b")
    header.cycle_filter()
    assert header.filter == "a"
    header.cycle_filter()
    assert header.filter == "b"
    header.cycle_filter()
    assert header.filter == "ALL"


def test_cycle_filter_backward_from_all_goes_to_last():
    header = _header("a", "b")
    header.cycle_filter_backward()
    assert header.filter == "b"
    header.cycle_filter_backward()
    assert header.filter == "a"


def test_reset_filter():
    header = _header("a", "b")
    header.cycle_filter()
    header.reset_filter()
    assert header.filter == "ALL"
    assert header.filter_index == 0


def test_set_initial_filter_known_and_unknown():
    header = _header("a", "b")
    header.set_initial_filter("missing", True)
    assert header.filter == "ALL"
    header.set_initial_filter("b", True)
    assert header.filter == "b"
    assert header.filter_index == 2


def test_add_job_orders_failed_first():
    header = _header("p1")
    header.add_job("f1", True)
    header.add_job("f2", True)
    header.add_job("p2", False)
    assert [job.name for job in header.available_jobs] == ["f1", "f2", "p1", "p2"]
    assert [job.failed for job in header.available_jobs] == [True, True, False, False]


def test_add_existing_job_marks_failed_without_duplicate():
    header = _header("p1")
    header.add_job("p1", True)
    assert len(header.available_jobs) == 1
    assert header.available_jobs[0].failed is True
    header.add_job("p1", False)
    assert header.available_jobs[0].failed is True


def test_render_default_sections():
    header = _header("a")
    header.set_tier_counts(3, 8)
    plain = strip_ansi(header.render(400))
    assert "Destill Analysis" in plain
    assert "Unique:3" in plain
    assert "Noise:8" in plain
    assert "[/] to search" in plain


def test_render_search_mode_and_query():
    header = _header("a")
    header.set_search("err", True)
    assert "Search: err█" in strip_ansi(header.render(400))
    header.set_search("err", False)
    plain = strip_ansi(header.render(400))
    assert "Search: err" in plain
    assert "█" not in plain


def test_render_counts_and_pending():
    header = _header("a")
    header.set_load_status(LoadStatus.COMPLETE, 5, 2)
    header.pending_count = 2
    plain = strip_ansi(header.render(400))
    assert "5 findings" in plain
    assert "2 jobs" in plain
    assert "⚡ 2 new (r)" in plain
    header.low_confidence_count = 1
    assert "1 low conf" in strip_ansi(header.render(400))


def test_render_fits_width():
    header = _header("a", "b")
    header.set_tier_counts(3, 8)
    for width in (60, 100, 200):
        lines = header.render(width).split("\n")
        assert all(visual_width(strip_ansi(line)) <= width for line in lines)


def test_tier_filter_changes_styling_only():
    header = _header("a")
    default = header.render(300)
    header.tier_filter = 1
    unique_only = header.render(300)
    assert default != unique_only
    assert strip_ansi(default) == strip_ansi(unique_only)