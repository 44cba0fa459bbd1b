"""Unit tests for duration formatting."""

from media_panel.utils.formatting import format_duration


def test_format_zero():
    assert format_duration(0) == "0h0m0s"


def test_format_hour_minute_second():
    assert format_duration(3661) == "1h1m1s"


def test_format_minutes_wrap_at_sixty():
    # 2h 0m 5s
    assert format_duration(7205) == "2h0m5s"


def test_format_keeps_fractional_seconds():
    assert format_duration(61.5) == "0h1m1.5s"


def test_format_integral_float_has_no_decimal_point():
    assert format_duration(584.0) == "0h9m44s"


def test_format_long_track_hours_not_wrapped():
    assert format_duration(30 * 3600 + 59) == "30h0m59s"
