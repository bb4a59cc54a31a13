from datetime import date, datetime

import pytest

from backend.cruise_days import (
    CruiseConfig,
    ExplicitCruiseDay,
    Unspecified,
    WeekdayName,
    date_for_cruise_day,
    is_after_cruise,
    is_before_cruise,
    resolve_cruise_day,
    selector_from_args,
    sunday_first_weekday,
    weekday_number,
)

SATURDAY_START = CruiseConfig(start_date=datetime(2022, 3, 5), start_day_of_week=7, length_in_days=8)
# 2022-03-09 is a Wednesday
A_WEDNESDAY = datetime(2022, 3, 9, 14, 30)


def test_weekday_table_is_sunday_first():
    assert [weekday_number(n) for n in ('sun', 'mon', 'tue', 'wed', 'thu', 'fri', 'sat')] == [1, 2, 3, 4, 5, 6, 7]


def test_unknown_weekday_name_resolves_like_saturday():
    assert weekday_number('xyz') == 7
    assert resolve_cruise_day(WeekdayName('xyz'), SATURDAY_START, A_WEDNESDAY) == \
        resolve_cruise_day(WeekdayName('sat'), SATURDAY_START, A_WEDNESDAY)


def test_weekday_names_map_relative_to_embarkation():
    assert resolve_cruise_day(WeekdayName('sat'), SATURDAY_START, A_WEDNESDAY)[0] == 1
    assert resolve_cruise_day(WeekdayName('sun'), SATURDAY_START, A_WEDNESDAY)[0] == 2
    assert resolve_cruise_day(WeekdayName('fri'), SATURDAY_START, A_WEDNESDAY)[0] == 7


def test_weekday_selection_never_reaches_second_week():
    days = {resolve_cruise_day(WeekdayName(n), SATURDAY_START, A_WEDNESDAY)[0]
            for n in ('sun', 'mon', 'tue', 'wed', 'thu', 'fri', 'sat')}
    assert days == set(range(1, 8))


def test_weekday_selection_ignores_now():
    first = resolve_cruise_day(WeekdayName('tue'), SATURDAY_START, datetime(2022, 3, 6))
    second = resolve_cruise_day(WeekdayName('tue'), SATURDAY_START, datetime(2031, 11, 20, 23, 59))
    assert first == second


def test_unspecified_uses_weekday_of_now():
    assert sunday_first_weekday(A_WEDNESDAY) == 4
    assert resolve_cruise_day(Unspecified(), SATURDAY_START, A_WEDNESDAY) == \
        resolve_cruise_day(WeekdayName('wed'), SATURDAY_START, A_WEDNESDAY)
    assert resolve_cruise_day(Unspecified(), SATURDAY_START, A_WEDNESDAY)[0] == 5


@pytest.mark.parametrize('start_day', range(1, 8))
def test_days_cover_cruise_with_one_active(start_day):
    config = CruiseConfig(start_date=datetime(2022, 3, 5), start_day_of_week=start_day, length_in_days=10)
    _, days = resolve_cruise_day(WeekdayName('sun'), config, A_WEDNESDAY)
    assert len(days) == 10
    assert [d.index for d in days] == list(range(1, 11))
    assert sum(1 for d in days if d.is_active) == 1


def test_day_labels_start_on_embarkation_weekday():
    _, days = resolve_cruise_day(ExplicitCruiseDay(1), SATURDAY_START, A_WEDNESDAY)
    assert [d.name for d in days] == ['Sat', 'Sun', 'Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat']


def test_explicit_cruise_day_passes_through():
    day, days = resolve_cruise_day(ExplicitCruiseDay(3), SATURDAY_START, A_WEDNESDAY)
    assert day == 3
    assert [d.index for d in days if d.is_active] == [3]


def test_explicit_cruise_day_is_not_clamped():
    day, days = resolve_cruise_day(ExplicitCruiseDay(42), SATURDAY_START, A_WEDNESDAY)
    assert day == 42
    assert not any(d.is_active for d in days)
    assert resolve_cruise_day(ExplicitCruiseDay(-1), SATURDAY_START, A_WEDNESDAY)[0] == -1


def test_config_rejects_bad_values():
    with pytest.raises(ValueError):
        CruiseConfig(start_date=datetime(2022, 3, 5), start_day_of_week=0, length_in_days=8)
    with pytest.raises(ValueError):
        CruiseConfig(start_date=datetime(2022, 3, 5), start_day_of_week=8, length_in_days=8)
    with pytest.raises(ValueError):
        CruiseConfig(start_date=datetime(2022, 3, 5), start_day_of_week=7, length_in_days=0)


def test_config_from_start_date_derives_weekday():
    assert CruiseConfig.from_start_date(date(2022, 3, 5), 8).start_day_of_week == 7
    assert CruiseConfig.from_start_date(datetime(2022, 3, 6), 8).start_day_of_week == 1


def test_selector_from_args():
    assert selector_from_args({'day': 'mon'}) == WeekdayName('mon')
    assert selector_from_args({'cruiseday': '4'}) == ExplicitCruiseDay(4)
    assert selector_from_args({'day': 'mon', 'cruiseday': '4'}) == WeekdayName('mon')
    assert selector_from_args({'cruiseday': 'four'}) == Unspecified()
    assert selector_from_args({}) == Unspecified()


def test_cruise_day_dates():
    assert date_for_cruise_day(3, SATURDAY_START) == date(2022, 3, 7)


def test_before_and_after_cruise():
    assert is_before_cruise(SATURDAY_START, datetime(2022, 3, 4))
    assert not is_before_cruise(SATURDAY_START, A_WEDNESDAY)
    assert not is_after_cruise(SATURDAY_START, A_WEDNESDAY)
    assert is_after_cruise(SATURDAY_START, datetime(2022, 3, 13, 0, 1))
