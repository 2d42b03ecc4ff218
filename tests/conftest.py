"""
In-memory stand-ins for a WebDriver session, just deep enough for the page
helpers and Selenium's expected conditions to run against them.
"""

import re

import pytest
from selenium.common.exceptions import (
    NoAlertPresentException,
    NoSuchElementException,
    NoSuchWindowException,
)
from selenium.webdriver.common.by import By

from page_actions.config_reader import FrameworkConfig
from page_actions.web_actions import BasePage


def _outcome(value):
    if isinstance(value, BaseException):
        raise value
    return value


class FakeElement:
    def __init__(
            self,
            text="",
            displayed=True,
            enabled=True,
            tag_name="div",
            size=None,
            shadow_root=None,
            click_errors=(),
            attributes=None,
            children=(),
    ):
        self.text = text
        self.displayed = displayed
        self.enabled = enabled
        self.tag_name = tag_name
        self.size = size or {"width": 100, "height": 50}
        self.shadow_root = shadow_root
        self.click_errors = list(click_errors)
        self.clicks = 0
        self.typed = []
        self.cleared = 0
        self.selected = False
        self.attributes = dict(attributes or {})
        self.parent = None
        self.children = list(children)
        for child in self.children:
            child.parent = self

    def is_displayed(self):
        return _outcome(self.displayed)

    def is_enabled(self):
        return self.enabled

    def click(self):
        if self.click_errors:
            raise self.click_errors.pop(0)
        self.clicks += 1
        if self.tag_name == "option" and self.parent is not None:
            for sibling in self.parent.children:
                sibling.selected = False
            self.selected = True

    def clear(self):
        self.cleared += 1

    def send_keys(self, text):
        self.typed.append(text)

    def is_selected(self):
        return self.selected

    def get_dom_attribute(self, name):
        return self.attributes.get(name)

    def value_of_css_property(self, name):
        return {"display": "block", "visibility": "visible", "opacity": "1"}[name]

    def find_elements(self, by, value):
        """Answer the option queries made by Selenium's Select helper."""
        if by == By.TAG_NAME:
            return [child for child in self.children if child.tag_name == value]
        text = re.search(r'normalize-space\(\.\) = "(.*)"\]', value)
        if text:
            return [child for child in self.children if child.text.strip() == text.group(1)]
        option_value = re.search(r'value ?= ?"(.*)"\]', value)
        if option_value:
            return [
                child for child in self.children
                if child.attributes.get("value") == option_value.group(1)
            ]
        return []

    def __repr__(self):
        return f"FakeElement({self.text!r})"


class FakeShadowRoot:
    def __init__(self, elements=None):
        self.elements = elements or {}

    def find_element(self, by, value):
        if value not in self.elements:
            raise NoSuchElementException(f"no {value} in shadow root")
        return self.elements[value]

    def find_elements(self, by, value):
        found = self.elements.get(value)
        return [found] if found else []


class FakeAlert:
    def __init__(self, text="Are you sure?"):
        self.text = text
        self.accepted = False
        self.dismissed = False
        self.keys = []

    def accept(self):
        self.accepted = True

    def dismiss(self):
        self.dismissed = True

    def send_keys(self, text):
        self.keys.append(text)


class FakeSwitchTo:
    def __init__(self, driver):
        self._driver = driver
        self.frames = []
        self.default_content_calls = 0
        self.parent_frame_calls = 0

    def window(self, handle):
        if handle not in self._driver.window_handles:
            raise NoSuchWindowException(handle)
        self._driver.current_window_handle = handle

    def frame(self, reference):
        self.frames.append(reference)

    def default_content(self):
        self.default_content_calls += 1

    def parent_frame(self):
        self.parent_frame_calls += 1

    @property
    def alert(self):
        if self._driver.alert is None:
            raise NoAlertPresentException("no alert open")
        return self._driver.alert


class FakeDriver:
    """
    ``elements`` maps ``(by, value)`` to an element, an exception to raise, or
    a list of those consumed one per lookup (the last one sticks).
    ``script_handlers`` maps a script source to a callable receiving the
    script arguments.
    """

    def __init__(self):
        self.elements = {}
        self.element_lists = {}
        self.script_handlers = {}
        self.scripts = []
        self.lookups = []
        self.window_handles = ["main"]
        self.current_window_handle = "main"
        self.titles = {"main": "Main page"}
        self.urls = {"main": "https://example.com/"}
        self.alert = None
        self.visited = []
        self.history = []
        self.switch_to = FakeSwitchTo(self)

    def find_element(self, by, value):
        self.lookups.append((by, value))
        entry = self.elements.get((by, value))
        if entry is None:
            raise NoSuchElementException(f"{by}={value}")
        if isinstance(entry, list):
            entry = entry.pop(0) if len(entry) > 1 else entry[0]
        return _outcome(entry)

    def find_elements(self, by, value):
        return list(self.element_lists.get((by, value), []))

    def execute_script(self, script, *args):
        self.scripts.append((script, args))
        handler = self.script_handlers.get(script)
        return handler(*args) if handler else None

    @property
    def title(self):
        return self.titles.get(self.current_window_handle, "")

    @property
    def current_url(self):
        return self.urls.get(self.current_window_handle, "")

    def add_window(self, handle, title="", url=""):
        self.window_handles.append(handle)
        self.titles[handle] = title
        self.urls[handle] = url

    def close(self):
        self.window_handles.remove(self.current_window_handle)

    def get(self, url):
        self.visited.append(url)
        self.urls[self.current_window_handle] = url

    def refresh(self):
        self.history.append("refresh")

    def back(self):
        self.history.append("back")

    def forward(self):
        self.history.append("forward")

    def get_screenshot_as_png(self):
        return b"\x89PNG fake"


@pytest.fixture
def driver():
    return FakeDriver()


@pytest.fixture
def fast_config(tmp_path):
    return FrameworkConfig(
        explicit_wait=0.3,
        fluent_wait=0.3,
        poll_interval=0.01,
        screenshot_dir=str(tmp_path / "screenshots"),
    )


@pytest.fixture
def page(driver, fast_config):
    return BasePage(driver, config=fast_config)


@pytest.fixture
def make_element():
    return FakeElement


@pytest.fixture
def make_shadow_root():
    return FakeShadowRoot


@pytest.fixture
def make_alert():
    return FakeAlert
