"""Calendar collaborators: what day it is, and its ISO weekday letter."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta

# Tuesday/Thursday are T/R and Saturday/Sunday are S/U so every letter is unique.
ISO_DAY_LETTERS = {1: "M", 2: "T", 3: "W", 4: "R", 5: "F", 6: "S", 7: "U"}
DAY_LETTERS = frozenset(ISO_DAY_LETTERS.values())


def iso_day_letter(day: date) -> str:
    return ISO_DAY_LETTERS[day.isoweekday()]


def yesterday(day: date) -> date:
    return day - timedelta(days=1)


class SystemCalendar:
    """Reads today's date from the local clock."""

    def today(self) -> date:
        return date.today()


@dataclass(frozen=True)
class FixedCalendar:
    """Always reports the same day."""

    day: date

    def today(self) -> date:
        return self.day
