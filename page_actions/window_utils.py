"""
Helpers for tests that juggle several browser windows or tabs.

Every helper that has to visit other windows switches back to the window
it started from before returning.
"""

from typing import Callable, Dict, Iterable, List, Optional, TypeVar

import allure
from loguru import logger
from selenium.common.exceptions import NoSuchWindowException

from . import remote_scripts
from .wait_and_act import ConditionTimeoutError, WaitPolicy, poll_until

T = TypeVar("T")

NEW_WINDOW_POLICY = WaitPolicy(timeout=5, poll_interval=0.25, ignored=frozenset())


@allure.step("Get all window handles with titles")
def get_all_window_handles_with_titles(driver) -> Dict[str, str]:
    current_handle = driver.current_window_handle
    handle_titles = {}
    try:
        for handle in driver.window_handles:
            driver.switch_to.window(handle)
            handle_titles[handle] = driver.title
    finally:
        driver.switch_to.window(current_handle)
    logger.debug(f"Found {len(handle_titles)} windows: {handle_titles}")
    return handle_titles


def _find_window_handle(driver, matches: Callable[[], bool]) -> Optional[str]:
    current_handle = driver.current_window_handle
    try:
        for handle in driver.window_handles:
            driver.switch_to.window(handle)
            if matches():
                return handle
        return None
    finally:
        driver.switch_to.window(current_handle)


@allure.step("Find window handle by title: {title}")
def find_window_handle_by_title(driver, title: str) -> Optional[str]:
    target_handle = _find_window_handle(driver, lambda: title in driver.title)
    if target_handle:
        logger.debug(f"Found window with title '{title}', handle: {target_handle}")
    else:
        logger.warning(f"No window found with title: {title}")
    return target_handle


@allure.step("Find window handle by URL: {url_part}")
def find_window_handle_by_url(driver, url_part: str) -> Optional[str]:
    target_handle = _find_window_handle(
        driver, lambda: url_part in driver.current_url
    )
    if target_handle:
        logger.debug(
            f"Found window with URL containing '{url_part}', handle: {target_handle}"
        )
    else:
        logger.warning(f"No window found with URL containing: {url_part}")
    return target_handle


def window_exists(driver, window_handle: str) -> bool:
    return window_handle in driver.window_handles


@allure.step("Execute function in window with handle: {window_handle}")
def execute_in_window(driver, window_handle: str, function: Callable[..., T]) -> T:
    """
    Run ``function(driver)`` with ``window_handle`` focused, then return to
    the original window if it is still open.
    """
    current_handle = driver.current_window_handle
    try:
        driver.switch_to.window(window_handle)
        return function(driver)
    finally:
        if window_exists(driver, current_handle):
            driver.switch_to.window(current_handle)


@allure.step("Close all windows except: {window_handle}")
def close_all_windows_except(driver, window_handle: str) -> None:
    for handle in list(driver.window_handles):
        if handle != window_handle:
            driver.switch_to.window(handle)
            driver.close()
            logger.debug(f"Closed window with handle: {handle}")
    driver.switch_to.window(window_handle)
    logger.debug(f"Closed all windows except window with handle: {window_handle}")


@allure.step("Close all windows except current")
def close_all_windows_except_current(driver) -> None:
    close_all_windows_except(driver, driver.current_window_handle)


def wait_for_new_window(
        driver,
        handles_before: Iterable[str],
        policy: WaitPolicy = NEW_WINDOW_POLICY,
) -> str:
    """
    Wait until a window handle not in ``handles_before`` appears and return it.

    :raises NoSuchWindowException: when no new window opened in time
    """
    handles_before = set(handles_before)
    try:
        handles = poll_until(
            lambda: set(driver.window_handles) - handles_before,
            bool,
            policy,
            description="new window",
        )
    except ConditionTimeoutError as exc:
        raise NoSuchWindowException("No new window found") from exc
    return sorted(handles)[0]


@allure.step("Open new window with URL: {url}")
def open_new_window(driver, url: str, policy: WaitPolicy = NEW_WINDOW_POLICY) -> str:
    handles_before = list(driver.window_handles)
    remote_scripts.OPEN_WINDOW.run(driver, url)
    new_handle = wait_for_new_window(driver, handles_before, policy)
    logger.debug(f"Opened new window with URL: {url}, handle: {new_handle}")
    return new_handle


@allure.step("Transfer data from current window to: {target_window_handle}")
def transfer_data_between_windows(
        driver, target_window_handle: str, key: str, value: str
) -> None:
    """
    Store ``key``/``value`` in localStorage of the current window, then of
    the target window, leaving the target window focused.
    """
    remote_scripts.LOCAL_STORAGE_SET.run(driver, key, value)
    driver.switch_to.window(target_window_handle)
    remote_scripts.LOCAL_STORAGE_SET.run(driver, key, value)
    logger.debug(
        f"Transferred data to window {target_window_handle}: {key}={value}"
    )


def get_all_open_window_handles(driver) -> List[str]:
    return list(driver.window_handles)


@allure.step("Check if element exists in window: {window_handle}")
def element_exists_in_window(driver, window_handle: str, element) -> bool:
    def _displayed(_driver) -> bool:
        try:
            return element.is_displayed()
        except Exception as er:  # noqa: any lookup failure means "not there"
            logger.debug(f"Element not available in window {window_handle}: {er}")
            return False

    return execute_in_window(driver, window_handle, _displayed)
