"""
Browser clock overrides.

The page's ``Date`` constructor and ``Date.prototype.getTimezoneOffset`` are
replaced in place; the originals are kept on ``window`` so the resets can
restore them. Overrides do not survive a navigation.
"""

import time
from datetime import datetime, timezone
from typing import Union

import allure
from loguru import logger

from . import remote_scripts


def _epoch_millis(date_time: Union[datetime, str]) -> int:
    if isinstance(date_time, str):
        date_time = datetime.fromisoformat(date_time.replace("Z", "+00:00"))
    if date_time.tzinfo is None:
        date_time = date_time.replace(tzinfo=timezone.utc)
    return int(date_time.timestamp() * 1000)


@allure.step("Set browser date and time to: {date_time}")
def set_browser_date_time(driver, date_time: Union[datetime, str]) -> None:
    """
    Freeze ``new Date()`` and ``Date.now()`` in the page at ``date_time``.

    :param driver: WebDriver session
    :param date_time: datetime or ISO-8601 string; naive values are UTC
    """
    timestamp = _epoch_millis(date_time)
    remote_scripts.SAVE_ORIGINAL_DATE.run(driver)
    remote_scripts.OVERRIDE_DATE.run(driver, timestamp)
    logger.info(f"Set browser date and time to: {date_time}")


@allure.step("Set browser timezone offset to: {offset_minutes} minutes")
def set_browser_timezone_offset(driver, offset_minutes: int) -> None:
    """
    Make the page believe it runs at UTC+``offset_minutes``.

    JavaScript reports offsets with the opposite sign, so
    ``getTimezoneOffset()`` returns ``-offset_minutes`` afterwards.
    """
    remote_scripts.SET_TIMEZONE_OFFSET.run(driver, -offset_minutes)
    logger.info(f"Set browser timezone offset to: {offset_minutes} minutes")


@allure.step("Reset browser date and time")
def reset_browser_date_time(driver) -> None:
    remote_scripts.RESET_DATE.run(driver)
    logger.info("Reset browser date and time")


@allure.step("Reset browser timezone offset")
def reset_browser_timezone_offset(driver) -> None:
    remote_scripts.RESET_TIMEZONE_OFFSET.run(driver)
    logger.info("Reset browser timezone offset")


@allure.step("Reset all time-related modifications")
def reset_all_time_modifications(driver) -> None:
    reset_browser_date_time(driver)
    reset_browser_timezone_offset(driver)
    logger.info("Reset all time-related modifications")


def pause(seconds: float) -> None:
    """Pause execution; prefer the explicit waits whenever there is a condition."""
    time.sleep(seconds)
    logger.debug(f"Paused execution for {seconds}s")
