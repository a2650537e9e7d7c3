"""
타임존 유틸리티

일일 보너스의 "오늘"은 클라이언트 로컬 시간이 아니라 서버 설정(ECONOMY_TIMEZONE, 기본 UTC) 기준입니다.
"""

from datetime import date, datetime, timedelta

import pytz


def get_economy_now(tz_name: str = "UTC") -> datetime:
    """경제 시스템 기준 타임존의 현재 시각"""
    return datetime.now(pytz.timezone(tz_name))


def get_economy_today(tz_name: str = "UTC") -> date:
    """경제 시스템 기준 타임존의 오늘 날짜"""
    return get_economy_now(tz_name).date()


def previous_day(value: date) -> date:
    return value - timedelta(days=1)
