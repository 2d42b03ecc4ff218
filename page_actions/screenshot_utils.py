import os
from datetime import datetime
from typing import Optional

import allure
from loguru import logger

SCREENSHOT_DIR = os.path.join("target", "screenshots")


def attach_screenshot_to_allure(png: bytes, name: str = "Screenshot") -> None:
    allure.attach(png, name=name, attachment_type=allure.attachment_type.PNG)


def take_screenshot(
        driver,
        screenshot_name: str,
        directory: str = SCREENSHOT_DIR,
) -> Optional[str]:
    """
    Save a PNG of the current viewport as ``<name>_<timestamp>.png`` and
    attach it to the Allure report.

    :param driver: WebDriver session
    :param screenshot_name: prefix of the file name
    :param directory: target directory, created when missing
    :return: path of the saved file, or None when nothing could be saved
    """
    if driver is None:
        logger.error("Driver is None. Cannot take screenshot.")
        return None
    if not hasattr(driver, "get_screenshot_as_png"):
        logger.error("Driver doesn't support taking screenshots")
        return None

    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    destination = os.path.join(directory, f"{screenshot_name}_{timestamp}.png")
    try:
        png = driver.get_screenshot_as_png()
        os.makedirs(directory, exist_ok=True)
        with open(destination, "wb") as file:
            file.write(png)
    except OSError as er:
        logger.error(f"Failed to take screenshot: {er}")
        return None

    attach_screenshot_to_allure(png, name=screenshot_name)
    logger.info(f"Screenshot saved: {destination}")
    return destination
