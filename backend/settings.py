"""Environment-driven cruise settings and the local clock used by the events pages."""

import os
from datetime import datetime

import pytz
from flask import current_app

from backend.cruise_days import CruiseConfig

DEFAULT_CRUISE_START_DATE = '2022-03-05'
DEFAULT_CRUISE_LENGTH_DAYS = 8


def load_cruise_config(environ=None):
    """Build the cruise config from CRUISE_START_DATE / CRUISE_LENGTH_DAYS / CRUISE_START_DAY_OF_WEEK."""
    environ = os.environ if environ is None else environ
    start_date = datetime.strptime(environ.get('CRUISE_START_DATE', DEFAULT_CRUISE_START_DATE), '%Y-%m-%d')
    length_in_days = int(environ.get('CRUISE_LENGTH_DAYS', DEFAULT_CRUISE_LENGTH_DAYS))
    start_day_of_week = environ.get('CRUISE_START_DAY_OF_WEEK')
    if start_day_of_week:
        return CruiseConfig(start_date=start_date, start_day_of_week=int(start_day_of_week),
                            length_in_days=length_in_days)
    return CruiseConfig.from_start_date(start_date, length_in_days)


def cruise_config():
    return current_app.config['CRUISE']


def local_now(tz_name=None):
    """Current wall-clock time in the ship's timezone, as a naive datetime."""
    if tz_name is None:
        tz_name = current_app.config.get('CRUISE_TIMEZONE', 'UTC')
    return datetime.now(pytz.timezone(tz_name)).replace(tzinfo=None)


def local_to_utc(moment, tz_name=None):
    """Ship-local naive datetime to the naive UTC the database stores."""
    if tz_name is None:
        tz_name = current_app.config.get('CRUISE_TIMEZONE', 'UTC')
    return pytz.timezone(tz_name).localize(moment).astimezone(pytz.UTC).replace(tzinfo=None)


def utc_now():
    return datetime.now(pytz.UTC).replace(tzinfo=None)
