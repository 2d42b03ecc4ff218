"""
JavaScript executed in the page, each script paired with the shape of the
value it returns.

Arguments are always bound through ``arguments[n]``; nothing is formatted
into the script source.
"""

from dataclasses import dataclass
from typing import Any, Callable, List, NamedTuple, Optional

from loguru import logger


class Rgba(NamedTuple):
    red: int
    green: int
    blue: int
    alpha: int


class Point(NamedTuple):
    x: int
    y: int


class CanvasSize(NamedTuple):
    width: int
    height: int


def _identity(value: Any) -> Any:
    return value


def _none(value: Any) -> None:
    return None


def _to_rgba(value) -> Optional[Rgba]:
    if value is None:
        return None
    channels = list(value.values()) if isinstance(value, dict) else list(value)
    if len(channels) != 4:
        logger.warning(f"Unexpected pixel data: {value!r}")
        return None
    return Rgba(*(int(channel) for channel in channels))


def _to_points(value) -> List[Point]:
    return [Point(int(point["x"]), int(point["y"])) for point in value or []]


def _to_canvas_size(value) -> Optional[CanvasSize]:
    if not value:
        return None
    return CanvasSize(int(value["width"]), int(value["height"]))


def _to_list(value) -> list:
    return list(value or [])


@dataclass(frozen=True)
class RemoteScript:
    """A named script together with the parser for its raw result."""

    name: str
    source: str
    parse: Callable[[Any], Any] = _identity

    def run(self, driver, *args):
        logger.trace(f'Executing script "{self.name}"')
        return self.parse(driver.execute_script(self.source, *args))


def shadow_expression(expression: str) -> RemoteScript:
    """
    Build a script evaluating ``expression`` against the shadow root of
    ``arguments[0]``; the remaining arguments follow as ``arguments[1..]``.
    """
    return RemoteScript(
        name=f"shadowRoot.{expression}",
        source=f"return arguments[0].shadowRoot.{expression}",
    )


JS_CLICK = RemoteScript("click", "arguments[0].click();", _none)

SCROLL_INTO_VIEW = RemoteScript(
    "scroll into view",
    "arguments[0].scrollIntoView({behavior: 'smooth', block: 'center'});",
    _none,
)

DOCUMENT_READY_STATE = RemoteScript(
    "document ready state", "return document.readyState"
)

SHADOW_ROOT = RemoteScript("shadow root", "return arguments[0].shadowRoot")

ALL_SHADOW_ELEMENTS = RemoteScript(
    "all shadow elements",
    """
    function collect(root, selector, result) {
      if (!root || !root.shadowRoot) return result;
      result.push(...root.shadowRoot.querySelectorAll(selector));
      root.shadowRoot.querySelectorAll('*').forEach(el => collect(el, selector, result));
      return result;
    }
    const result = [];
    document.querySelectorAll('*').forEach(el => collect(el, arguments[0], result));
    return result;
    """,
    _to_list,
)

CANVAS_FUNCTION_PREFIX = (
    "const canvas = arguments[0];"
    "const ctx = canvas.getContext('2d');"
)

CANVAS_PIXEL = RemoteScript(
    "canvas pixel",
    CANVAS_FUNCTION_PREFIX
    + "const pixel = ctx.getImageData(arguments[1], arguments[2], 1, 1).data;"
    "return [pixel[0], pixel[1], pixel[2], pixel[3]];",
    _to_rgba,
)

CANVAS_SIZE = RemoteScript(
    "canvas size",
    "const canvas = arguments[0];"
    "return {width: canvas.width, height: canvas.height};",
    _to_canvas_size,
)

CANVAS_SCAN_COLOR = RemoteScript(
    "canvas colour scan",
    CANVAS_FUNCTION_PREFIX
    + """
    const r = arguments[1], g = arguments[2], b = arguments[3];
    const tolerance = arguments[4], step = arguments[5];
    const width = canvas.width, height = canvas.height;
    const data = ctx.getImageData(0, 0, width, height).data;
    const points = [];
    for (let y = 0; y < height; y += step) {
      for (let x = 0; x < width; x += step) {
        const i = (y * width + x) * 4;
        if (Math.abs(data[i] - r) <= tolerance &&
            Math.abs(data[i + 1] - g) <= tolerance &&
            Math.abs(data[i + 2] - b) <= tolerance) {
          points.push({x: x, y: y});
        }
      }
    }
    return points;
    """,
    _to_points,
)

CANVAS_DRAW_LINE = RemoteScript(
    "canvas draw line",
    CANVAS_FUNCTION_PREFIX
    + "ctx.beginPath();"
    "ctx.moveTo(arguments[1], arguments[2]);"
    "ctx.lineTo(arguments[3], arguments[4]);"
    "ctx.stroke();",
    _none,
)

CANVAS_DRAW_TEXT = RemoteScript(
    "canvas draw text",
    CANVAS_FUNCTION_PREFIX
    + "ctx.font = arguments[4];"
    "ctx.fillText(arguments[1], arguments[2], arguments[3]);",
    _none,
)

CANVAS_CLEAR = RemoteScript(
    "canvas clear",
    CANVAS_FUNCTION_PREFIX + "ctx.clearRect(0, 0, canvas.width, canvas.height);",
    _none,
)

SAVE_ORIGINAL_DATE = RemoteScript(
    "save original Date",
    "if (!window.originalDate) { window.originalDate = Date; }",
    _none,
)

OVERRIDE_DATE = RemoteScript(
    "override Date",
    """
    const timestamp = arguments[0];
    const OriginalDate = window.originalDate || Date;
    window.originalDate = OriginalDate;
    Date = class extends OriginalDate {
      constructor(...args) {
        if (args.length) { super(...args); } else { super(timestamp); }
      }
      static now() { return timestamp; }
    };
    """,
    _none,
)

RESET_DATE = RemoteScript(
    "reset Date",
    "if (window.originalDate) { Date = window.originalDate; }",
    _none,
)

SET_TIMEZONE_OFFSET = RemoteScript(
    "set timezone offset",
    """
    if (!window.originalGetTimezoneOffset) {
      window.originalGetTimezoneOffset = Date.prototype.getTimezoneOffset;
    }
    const offset = arguments[0];
    Date.prototype.getTimezoneOffset = function() { return offset; };
    """,
    _none,
)

RESET_TIMEZONE_OFFSET = RemoteScript(
    "reset timezone offset",
    """
    if (window.originalGetTimezoneOffset) {
      Date.prototype.getTimezoneOffset = window.originalGetTimezoneOffset;
    }
    """,
    _none,
)

OPEN_WINDOW = RemoteScript(
    "open window", "window.open(arguments[0], '_blank');", _none
)

LOCAL_STORAGE_SET = RemoteScript(
    "localStorage set",
    "localStorage.setItem(arguments[0], arguments[1]);",
    _none,
)

SAVE_ORIGINAL_FETCH = RemoteScript(
    "save original fetch",
    "if (!window.originalFetch) { window.originalFetch = window.fetch; }",
    _none,
)

FAIL_FETCH_FOR_URL = RemoteScript(
    "fail fetch for URL",
    """
    const urlPart = arguments[0];
    const originalFetch = window.originalFetch || window.fetch;
    window.fetch = function(resource, init) {
      const url = typeof resource === 'string' ? resource : resource.url;
      if (url.includes(urlPart)) {
        return Promise.reject(new Error('Simulated network error'));
      }
      return originalFetch.call(window, resource, init);
    };
    """,
    _none,
)

FAIL_FETCH_RANDOMLY = RemoteScript(
    "fail fetch randomly",
    """
    const failureRate = arguments[0];
    const originalFetch = window.originalFetch || window.fetch;
    window.fetch = function(resource, init) {
      if (Math.random() * 100 < failureRate) {
        return Promise.reject(new Error('Random network error'));
      }
      return originalFetch.call(window, resource, init);
    };
    """,
    _none,
)

RESET_FETCH = RemoteScript(
    "reset fetch",
    "if (window.originalFetch) { window.fetch = window.originalFetch; }",
    _none,
)
