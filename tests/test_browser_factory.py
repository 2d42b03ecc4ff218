import os

import pytest

from page_actions import browser_factory
from page_actions.browser_factory import (
    Browser,
    DriverFactory,
    configure_timeouts,
    get_chrome_options,
    get_firefox_options,
)
from page_actions.config_reader import FrameworkConfig


def test_browser_from_name():
    assert Browser.from_name(" Firefox ") is Browser.FIREFOX
    assert Browser.from_name(Browser.EDGE) is Browser.EDGE
    assert Browser.from_name("netscape") is Browser.CHROME


def test_chrome_options():
    options = get_chrome_options(
        headless=True,
        download_path="/tmp/downloads",
        proxy_address="10.0.0.1",
        proxy_port="3128",
        arguments=["--lang=en", "--lang=en"],
    )
    assert "--headless=new" in options.arguments
    assert "--proxy-server=10.0.0.1:3128" in options.arguments
    assert "--remote-allow-origins=*" in options.arguments
    assert options.arguments.count("--lang=en") == 1
    prefs = options.experimental_options["prefs"]
    assert prefs["download.default_directory"] == "/tmp/downloads"
    assert options.experimental_options["excludeSwitches"] == ["enable-logging"]


def test_edge_options_skip_chrome_only_flags():
    options = get_chrome_options(edge=True)
    assert "--remote-allow-origins=*" not in options.arguments
    assert "--headless=new" not in options.arguments


def test_firefox_options():
    options = get_firefox_options(
        headless=True,
        download_path="/tmp/downloads",
        proxy_address="proxy.local",
        proxy_port="8080",
    )
    assert "--headless" in options.arguments
    assert options.preferences["browser.download.dir"] == "/tmp/downloads"
    assert options.preferences["network.proxy.http_port"] == 8080


def test_download_path_is_created(tmp_path):
    target = tmp_path / "nested" / "downloads"
    assert browser_factory._validate_download_path(str(target)) == os.path.abspath(target)
    assert target.is_dir()


def test_configure_timeouts():
    calls = []

    class Driver:
        def implicitly_wait(self, value):
            calls.append(("implicit", value))

        def set_page_load_timeout(self, value):
            calls.append(("page_load", value))

        def set_script_timeout(self, value):
            calls.append(("script", value))

    configure_timeouts(Driver(), FrameworkConfig(page_load_timeout=45))
    assert calls == [("implicit", 0), ("page_load", 45), ("script", 30)]


def test_driver_factory_reuses_driver_per_thread(monkeypatch):
    created = []

    class Driver:
        quit_calls = 0

        def quit(self):
            Driver.quit_calls += 1

    def fake_create(config=None):
        created.append(Driver())
        return created[-1]

    monkeypatch.setattr(browser_factory, "create_driver", fake_create)
    DriverFactory.quit_driver()
    first = DriverFactory.get_driver()
    assert DriverFactory.get_driver() is first
    DriverFactory.quit_driver()
    assert Driver.quit_calls == 1
    assert DriverFactory.get_driver() is not first
    DriverFactory.quit_driver()


def test_missing_driver_binary_is_reported(tmp_path):
    with pytest.raises(FileNotFoundError):
        browser_factory._validate_driver(str(tmp_path / "chromedriver"), "chrome driver")
