import io

import pytest

from contextforge import output
from contextforge.output import (
    STYLE_SYMBOLS,
    Manager,
    Status,
    render_progress_bar,
)

HLINE = STYLE_SYMBOLS["hline"]
BULLET = STYLE_SYMBOLS["bullet"]


@pytest.mark.parametrize(
    "printer",
    [
        output.print_success,
        output.print_success2,
        output.print_error,
        output.print_warning,
        output.print_info,
        output.print_debug,
        output.print_detail,
    ],
)
def test_print_functions_write_line(printer, capsys):
    printer("hello there")
    assert capsys.readouterr().out == "hello there\n"


def test_progress_bar_full():
    bar = render_progress_bar(10, 10, 10)
    assert bar.count(HLINE) == 10
    assert "100.0%" in bar


def test_progress_bar_half_fills_half_width():
    width = 20
    bar = render_progress_bar(1, 2, width)
    assert bar.count(HLINE) == width // 2
    assert bar.startswith(BULLET)
    assert bar.endswith(BULLET + " ")


def test_progress_bar_default_width_when_non_positive():
    bar = render_progress_bar(4, 4, 0)
    assert bar.count(HLINE) == 30


def test_progress_bar_clamps_overflow():
    bar = render_progress_bar(50, 10, 8)
    assert bar.count(HLINE) == 8


def test_progress_bar_zero_total():
    bar = render_progress_bar(0, 0, 8)
    assert bar.count(HLINE) == 0
    assert "0.0%" in bar


def test_progress_bar_width_is_constant():
    lengths = {len(render_progress_bar(i, 10, 10)) for i in range(11)}
    assert len(lengths) == 1


def test_manager_initial_state():
    manager = Manager()
    assert manager.status is Status.PENDING
    assert manager.message == ""
    assert manager.completed is False


def test_complete_without_message_uses_default():
    manager = Manager()
    manager.report_progress(1, 2, "halfway")
    manager.complete("", None)
    assert manager.message == "Completed"
    assert manager.status is Status.SUCCESS
    assert manager.progress == ""
    assert manager.completed is True


def test_complete_with_error():
    manager = Manager()
    err = ValueError("boom")
    manager.complete("Done", err)
    assert manager.status is Status.ERROR
    assert manager.error is err
    assert manager.message == "Done"


def test_report_progress_clamps_negative():
    manager = Manager()
    manager.report_progress(-5, 10, "step")
    assert manager.progress.count(HLINE) == 0
    assert manager.progress.endswith("step")


def test_set_message():
    manager = Manager()
    manager.set_message("Working")
    assert manager.message == "Working"


def test_display_shows_waiting_when_idle():
    buf = io.StringIO()
    manager = Manager(stream=buf)
    manager.start_display()
    manager.stop_display()
    text = buf.getvalue()
    assert text.startswith("\n\n\n")
    assert "Waiting..." in text
    assert "\033[2A\033[J" in text


def test_display_shows_message_and_error():
    buf = io.StringIO()
    manager = Manager(stream=buf)
    with manager:
        manager.set_message("Collecting")
        manager.complete("", RuntimeError("network down"))
    text = buf.getvalue()
    assert "Completed" in text
    assert "Encountered Errors:" in text
    assert "network down" in text


def test_display_success_has_no_error_section():
    buf = io.StringIO()
    manager = Manager(stream=buf)
    with manager:
        manager.complete("All good", None)
    text = buf.getvalue()
    assert "All good" in text
    assert "Encountered Errors:" not in text


def test_disabled_display_only_prints_padding():
    buf = io.StringIO()
    manager = Manager(stream=buf)
    manager.disable()
    with manager:
        manager.complete("", RuntimeError("ignored"))
    assert buf.getvalue() == "\n\n\n"


def test_start_twice_raises():
    manager = Manager(stream=io.StringIO())
    manager.start_display()
    try:
        with pytest.raises(RuntimeError):
            manager.start_display()
    finally:
        manager.stop_display()