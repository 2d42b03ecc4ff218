"""
Canvas helpers.

Pointer actions take coordinates relative to the canvas' top-left corner
and translate them to the centre-based offsets WebDriver actions use.
Pixel reads and drawing go through the 2D context.
"""

from typing import List, Optional

import allure
from loguru import logger
from selenium.webdriver import ActionChains

from . import remote_scripts
from .remote_scripts import CanvasSize, Point, Rgba

SCAN_STEP = 5
DEFAULT_FONT = "16px Arial"


def _center_offset(canvas, x: int, y: int):
    size = canvas.size
    return int(x - size["width"] / 2), int(y - size["height"] / 2)


@allure.step("Click on Canvas at coordinates: ({x}, {y})")
def click_on_canvas(driver, canvas, x: int, y: int) -> None:
    offset_x, offset_y = _center_offset(canvas, x, y)
    ActionChains(driver).move_to_element_with_offset(
        canvas, offset_x, offset_y
    ).click().perform()
    logger.debug(f"Clicked on Canvas at coordinates: ({x}, {y})")


@allure.step("Drag on Canvas from ({start_x}, {start_y}) to ({end_x}, {end_y})")
def drag_on_canvas(
        driver, canvas, start_x: int, start_y: int, end_x: int, end_y: int
) -> None:
    offset_x, offset_y = _center_offset(canvas, start_x, start_y)
    ActionChains(driver).move_to_element_with_offset(
        canvas, offset_x, offset_y
    ).click_and_hold().move_by_offset(
        end_x - start_x, end_y - start_y
    ).release().perform()
    logger.debug(
        f"Dragged on Canvas from ({start_x}, {start_y}) to ({end_x}, {end_y})"
    )


@allure.step("Draw a line on Canvas from ({start_x}, {start_y}) to ({end_x}, {end_y})")
def draw_line_on_canvas(
        driver, canvas, start_x: int, start_y: int, end_x: int, end_y: int
) -> None:
    remote_scripts.CANVAS_DRAW_LINE.run(driver, canvas, start_x, start_y, end_x, end_y)
    logger.debug(
        f"Drew a line on Canvas from ({start_x}, {start_y}) to ({end_x}, {end_y})"
    )


@allure.step("Get pixel data from Canvas at coordinates: ({x}, {y})")
def get_pixel_color_at_coordinates(driver, canvas, x: int, y: int) -> Optional[Rgba]:
    color = remote_scripts.CANVAS_PIXEL.run(driver, canvas, x, y)
    if color is None:
        logger.warning(f"Failed to get pixel color at ({x}, {y})")
        return None
    logger.debug(f"Got pixel color at ({x}, {y}): RGBA{tuple(color)}")
    return color


@allure.step("Scan Canvas for color: {r},{g},{b}")
def scan_canvas_for_color(
        driver,
        canvas,
        r: int,
        g: int,
        b: int,
        tolerance: int = 0,
        step: int = SCAN_STEP,
) -> List[Point]:
    """
    Return every sampled point whose RGB channels are each within
    ``tolerance`` of ``(r, g, b)``. The canvas is sampled every ``step``
    pixels in both directions.
    """
    points = remote_scripts.CANVAS_SCAN_COLOR.run(
        driver, canvas, r, g, b, tolerance, step
    )
    logger.debug(
        f"Found {len(points)} points with color RGB({r},{g},{b}) "
        f"with tolerance {tolerance}"
    )
    return points


@allure.step("Draw text on Canvas at ({x}, {y}): {text}")
def draw_text_on_canvas(
        driver, canvas, text: str, x: int, y: int, font: str = DEFAULT_FONT
) -> None:
    remote_scripts.CANVAS_DRAW_TEXT.run(driver, canvas, text, x, y, font)
    logger.debug(f"Drew text on Canvas at ({x}, {y}): {text}")


@allure.step("Get Canvas dimensions")
def get_canvas_dimensions(driver, canvas) -> Optional[CanvasSize]:
    dimensions = remote_scripts.CANVAS_SIZE.run(driver, canvas)
    if dimensions is None:
        logger.warning("Failed to get Canvas dimensions")
        return None
    logger.debug(f"Canvas dimensions: {dimensions.width}x{dimensions.height}")
    return dimensions


@allure.step("Clear Canvas")
def clear_canvas(driver, canvas) -> None:
    remote_scripts.CANVAS_CLEAR.run(driver, canvas)
    logger.debug("Cleared Canvas")
