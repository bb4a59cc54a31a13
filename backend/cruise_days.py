"""Cruise-day math: map a weekday name, an explicit day, or "today" onto a day of the cruise."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional, Tuple, Union

# Sunday = 1 ... Saturday = 7
WEEKDAY_NUMBERS = {
    'sun': 1,
    'mon': 2,
    'tue': 3,
    'wed': 4,
    'thu': 5,
    'fri': 6,
    'sat': 7,
}
DEFAULT_WEEKDAY = WEEKDAY_NUMBERS['sat']
DAY_LABELS = ['Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']


@dataclass(frozen=True)
class CruiseConfig:
    start_date: datetime
    start_day_of_week: int
    length_in_days: int

    def __post_init__(self):
        if not 1 <= self.start_day_of_week <= 7:
            raise ValueError(f"start_day_of_week must be 1-7, got {self.start_day_of_week}")
        if self.length_in_days < 1:
            raise ValueError(f"length_in_days must be at least 1, got {self.length_in_days}")

    @classmethod
    def from_start_date(cls, start_date, length_in_days):
        """Build a config whose start weekday is taken from the embarkation date itself."""
        if not isinstance(start_date, datetime):
            start_date = datetime.combine(start_date, datetime.min.time())
        return cls(start_date=start_date, start_day_of_week=sunday_first_weekday(start_date),
                   length_in_days=length_in_days)

    @property
    def end_date(self) -> datetime:
        return self.start_date + timedelta(days=self.length_in_days)


@dataclass(frozen=True)
class WeekdayName:
    name: str


@dataclass(frozen=True)
class ExplicitCruiseDay:
    day: int


@dataclass(frozen=True)
class Unspecified:
    pass


DaySelector = Union[WeekdayName, ExplicitCruiseDay, Unspecified]


@dataclass(frozen=True)
class CruiseDay:
    name: str
    index: int
    is_active: bool

    def to_dict(self):
        return {'name': self.name, 'index': self.index, 'is_active': self.is_active}


def sunday_first_weekday(value) -> int:
    """Weekday of a date/datetime as 1-7 with Sunday = 1."""
    return value.isoweekday() % 7 + 1


def weekday_number(name: str) -> int:
    number = WEEKDAY_NUMBERS.get(name)
    if number is None:
        # Unrecognized names land on Saturday rather than erroring.
        return DEFAULT_WEEKDAY
    return number


def cruise_day_for_weekday(weekday: int, config: CruiseConfig) -> int:
    """Always 1-7, even on cruises longer than a week."""
    return (7 + weekday - config.start_day_of_week) % 7 + 1


def selector_from_args(args) -> DaySelector:
    """Read `day` or `cruiseday` from request args; `day` wins when both are present."""
    day_name = args.get('day')
    if day_name is not None:
        return WeekdayName(day_name)
    raw_cruise_day = args.get('cruiseday')
    if raw_cruise_day is not None:
        try:
            return ExplicitCruiseDay(int(raw_cruise_day))
        except (TypeError, ValueError):
            pass
    return Unspecified()


def build_cruise_days(config: CruiseConfig, active_day: int) -> List[CruiseDay]:
    days = []
    for day_index in range(1, config.length_in_days + 1):
        label = DAY_LABELS[(config.start_day_of_week + day_index - 2) % 7]
        days.append(CruiseDay(name=label, index=day_index, is_active=day_index == active_day))
    return days


def resolve_cruise_day(selector: DaySelector, config: CruiseConfig,
                       now: Optional[datetime] = None) -> Tuple[int, List[CruiseDay]]:
    """Resolve a day selector to a 1-based cruise day plus the day buttons for the whole cruise.

    `now` should already be in the observer's local time; it is only read for
    the Unspecified selector.
    """
    if isinstance(selector, ExplicitCruiseDay):
        cruise_day = selector.day
    elif isinstance(selector, WeekdayName):
        cruise_day = cruise_day_for_weekday(weekday_number(selector.name), config)
    else:
        if now is None:
            now = datetime.now()
        cruise_day = cruise_day_for_weekday(sunday_first_weekday(now), config)
    return cruise_day, build_cruise_days(config, cruise_day)


def date_for_cruise_day(cruise_day: int, config: CruiseConfig) -> date:
    return config.start_date.date() + timedelta(days=cruise_day - 1)


def is_before_cruise(config: CruiseConfig, now: datetime) -> bool:
    return now < config.start_date


def is_after_cruise(config: CruiseConfig, now: datetime) -> bool:
    return now > config.end_date
