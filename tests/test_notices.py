from datetime import date

import pytest

from daily_update.calendar_provider import FixedCalendar, iso_day_letter, yesterday
from daily_update.notices import NoticeBoard


def test_notice_board_keeps_newest():
    board = NoticeBoard(maxlen=3)
    for index in range(5):
        board.post(f"n{index}")

    assert [notice.message for notice in board.recent()] == ["n2", "n3", "n4"]
    assert board.recent(0) == []


def test_notice_board_rejects_unknown_level():
    with pytest.raises(ValueError):
        NoticeBoard().post("x", level="loud")


def test_iso_day_letters_cover_the_week():
    monday = date(2024, 1, 1)
    letters = [iso_day_letter(date.fromordinal(monday.toordinal() + offset)) for offset in range(7)]

    assert letters == ["M", "T", "W", "R", "F", "S", "U"]


def test_yesterday_and_fixed_calendar():
    assert yesterday(date(2024, 3, 1)) == date(2024, 2, 29)
    assert FixedCalendar(date(2024, 1, 7)).today() == date(2024, 1, 7)
