import pytest
from selenium.common.exceptions import NoSuchWindowException

from page_actions import remote_scripts, window_utils
from page_actions.wait_and_act import WaitPolicy

QUICK = WaitPolicy(timeout=0.1, poll_interval=0.01, ignored=frozenset())


@pytest.fixture
def windows(driver):
    driver.add_window("report", title="Quarterly report", url="https://example.com/report")
    driver.add_window("help", title="Help center", url="https://help.example.com/")
    return driver


def test_handles_with_titles_restores_focus(windows):
    titles = window_utils.get_all_window_handles_with_titles(windows)
    assert titles == {
        "main": "Main page",
        "report": "Quarterly report",
        "help": "Help center",
    }
    assert windows.current_window_handle == "main"


def test_find_window_by_title_and_url(windows):
    assert window_utils.find_window_handle_by_title(windows, "report") == "report"
    assert window_utils.find_window_handle_by_url(windows, "help.example") == "help"
    assert window_utils.find_window_handle_by_title(windows, "missing") is None
    assert windows.current_window_handle == "main"


def test_execute_in_window_returns_to_original(windows):
    title = window_utils.execute_in_window(windows, "help", lambda d: d.title)
    assert title == "Help center"
    assert windows.current_window_handle == "main"


def test_close_all_windows_except(windows):
    window_utils.close_all_windows_except(windows, "report")
    assert windows.window_handles == ["report"]
    assert windows.current_window_handle == "report"


def test_wait_for_new_window_returns_new_handle(driver):
    handles_before = list(driver.window_handles)
    driver.add_window("popup")
    assert window_utils.wait_for_new_window(driver, handles_before, QUICK) == "popup"


def test_wait_for_new_window_times_out(driver):
    with pytest.raises(NoSuchWindowException, match="No new window found"):
        window_utils.wait_for_new_window(driver, driver.window_handles, QUICK)


def test_open_new_window_runs_script_and_waits(driver):
    driver.script_handlers[remote_scripts.OPEN_WINDOW.source] = (
        lambda url: driver.add_window("tab-2", url=url)
    )
    handle = window_utils.open_new_window(driver, "https://example.com/new", QUICK)
    assert handle == "tab-2"
    assert driver.urls["tab-2"] == "https://example.com/new"


def test_element_exists_in_window(windows, make_element):
    assert window_utils.element_exists_in_window(windows, "help", make_element())
    assert not window_utils.element_exists_in_window(
        windows, "help", make_element(displayed=False)
    )
    assert windows.current_window_handle == "main"


def test_transfer_data_between_windows(windows):
    window_utils.transfer_data_between_windows(windows, "report", "token", "abc")
    storage_calls = [
        args for script, args in windows.scripts
        if script == remote_scripts.LOCAL_STORAGE_SET.source
    ]
    assert storage_calls == [("token", "abc"), ("token", "abc")]
    assert windows.current_window_handle == "report"
