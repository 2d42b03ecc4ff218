"""
Network conditions for resilience tests.

Throttling goes through the Chrome DevTools Protocol and therefore only
works on Chromium based drivers (Chrome, Edge). Error simulation replaces
``window.fetch`` in the current page and does not survive a navigation.
"""

import allure
from loguru import logger
from selenium.common.exceptions import WebDriverException

from . import remote_scripts

CONNECTION_TYPE = "cellular3g"
UNLIMITED = -1


def _supports_cdp(driver) -> bool:
    if hasattr(driver, "execute_cdp_cmd"):
        return True
    logger.warning("Network throttling is only supported for Chromium browsers")
    return False


def _kbps_to_bytes(kbps: int) -> int:
    return kbps * 1024 // 8


def _emulate_network_conditions(driver, conditions: dict) -> None:
    driver.execute_cdp_cmd("Network.enable", {})
    driver.execute_cdp_cmd("Network.emulateNetworkConditions", conditions)


@allure.step(
    "Throttle network with download: {download_kbps} Kbps, "
    "upload: {upload_kbps} Kbps, latency: {latency_ms} ms"
)
def throttle_network(
        driver, download_kbps: int, upload_kbps: int, latency_ms: int
) -> None:
    """
    Emulate a slow connection in the browser.

    :param driver: WebDriver session
    :param download_kbps: download bandwidth in kilobits per second
    :param upload_kbps: upload bandwidth in kilobits per second
    :param latency_ms: added round trip latency in milliseconds
    """
    if not _supports_cdp(driver):
        return
    try:
        _emulate_network_conditions(
            driver,
            {
                "offline": False,
                "latency": latency_ms,
                "downloadThroughput": _kbps_to_bytes(download_kbps),
                "uploadThroughput": _kbps_to_bytes(upload_kbps),
                "connectionType": CONNECTION_TYPE,
            },
        )
    except WebDriverException as er:
        logger.error(f"Failed to throttle network: {er}")
        raise
    logger.info(
        f"Network throttled with download: {download_kbps} Kbps, "
        f"upload: {upload_kbps} Kbps, latency: {latency_ms} ms"
    )


@allure.step("Reset network throttling")
def reset_network_throttling(driver) -> None:
    if not _supports_cdp(driver):
        return
    try:
        _emulate_network_conditions(
            driver,
            {
                "offline": False,
                "latency": 0,
                "downloadThroughput": UNLIMITED,
                "uploadThroughput": UNLIMITED,
                "connectionType": "none",
            },
        )
    except WebDriverException as er:
        logger.error(f"Failed to reset network throttling: {er}")
        raise
    logger.info("Network throttling reset")


@allure.step("Simulate network error for URL: {url_part}")
def simulate_network_error(driver, url_part: str) -> None:
    """Make every ``fetch`` whose URL contains ``url_part`` reject."""
    remote_scripts.SAVE_ORIGINAL_FETCH.run(driver)
    remote_scripts.FAIL_FETCH_FOR_URL.run(driver, url_part)
    logger.info(f"Simulated network error for URL: {url_part}")


@allure.step("Simulate random network errors with failure rate: {failure_rate_percent}%")
def simulate_random_network_errors(driver, failure_rate_percent: float) -> None:
    if not 0 <= failure_rate_percent <= 100:
        raise ValueError(
            f"failure rate must be between 0 and 100, got {failure_rate_percent}"
        )
    remote_scripts.SAVE_ORIGINAL_FETCH.run(driver)
    remote_scripts.FAIL_FETCH_RANDOMLY.run(driver, failure_rate_percent)
    logger.info(
        f"Simulated random network errors with failure rate: {failure_rate_percent}%"
    )


@allure.step("Reset network error simulation")
def reset_network_error_simulation(driver) -> None:
    remote_scripts.RESET_FETCH.run(driver)
    logger.info("Reset network error simulation")
