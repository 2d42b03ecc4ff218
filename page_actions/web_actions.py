"""
Base class for Page Objects driven through Selenium WebDriver.

Element helpers accept a :class:`~page_actions.locators.Locator`, a
``(by, value)`` tuple, a bare id/XPath string or an already resolved
``WebElement``. Locators are re-resolved on every poll, so a page that
re-renders between polls does not break a wait; a ``WebElement`` passed in
is used as-is.
"""

from typing import Any, Callable, List, Optional, Union

import allure
import loguru
from selenium.common.exceptions import (
    NoSuchElementException,
    NoSuchWindowException,
    TimeoutException,
)
from selenium.webdriver import ActionChains
from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.select import Select
from selenium.webdriver.support.ui import WebDriverWait

from . import canvas_utils, remote_scripts, screenshot_utils, time_utils
from .config_reader import FrameworkConfig, get_config_data
from .locators import Locator, Target, is_locator, to_locator
from .remote_scripts import Rgba
from .wait_and_act import (
    TRANSIENT_KINDS,
    ConditionTimeoutError,
    WaitPolicy,
    WebElementNotFoundError,
    classify_failure,
    is_clickable,
    is_present,
    is_visible,
    poll_until,
    wait_and_act,
    wait_for,
)


# Defining custom exceptions
class SelectionNotFoundError(Exception):
    """
    Custom Exception to raise when the selection not found
    """

    pass


class ParameterMissingError(Exception):
    """
    Custom Exception to raise when the parameter missing
    """

    pass


class BasePage:
    """
    Common behaviour for all page objects.

    Usage::

        class LoginPage(BasePage):
            USERNAME = Locator.id("username")
            SUBMIT = Locator.css("button[type=submit]")

            def login(self, username: str, password: str) -> None:
                self.type(self.USERNAME, username)
                self.type(Locator.id("password"), password, sensitive=True)
                self.click(self.SUBMIT)
    """

    def __init__(
            self,
            driver,
            base_url: Optional[str] = None,
            *,
            wait_policy: Optional[WaitPolicy] = None,
            fluent_policy: Optional[WaitPolicy] = None,
            config: Optional[FrameworkConfig] = None,
            **kwargs,
    ) -> None:
        """
        Parameters
        ----------
        driver : Selenium WebDriver
            The browser session every helper talks to.
        base_url : str | None
            Application root; defaults to ``base_url`` from the config.
        wait_policy : WaitPolicy | None
            Policy of the everyday element waits.
        fluent_policy : WaitPolicy | None
            Longer policy used for Shadow DOM lookups.
        config : FrameworkConfig | None
            Loaded from ``config.yaml`` when omitted.
        **kwargs
            logger : loguru compatible logger.
        """
        self.logger = kwargs.pop("logger", loguru.logger)
        self.driver = driver
        self.config = config or get_config_data()
        self.base_url = base_url or self.config.base_url
        self.wait_policy = wait_policy or WaitPolicy(
            timeout=self.config.explicit_wait,
            poll_interval=self.config.poll_interval,
        )
        self.fluent_policy = fluent_policy or WaitPolicy(
            timeout=self.config.fluent_wait,
            poll_interval=self.config.poll_interval,
            ignored=TRANSIENT_KINDS,
        )

    # ----------------------------------------------------------------------
    #  resolution helpers
    # ----------------------------------------------------------------------
    def _resolver(self, target: Target) -> Callable[[], WebElement]:
        if not is_locator(target):
            return lambda: target
        locator = to_locator(target)
        return lambda: self.driver.find_element(*locator)

    @staticmethod
    def _describe(target: Target, name: Optional[str] = None) -> str:
        if name:
            return name
        if is_locator(target):
            return str(to_locator(target))
        return str(target)

    def _policy(self, timeout: Optional[float]) -> WaitPolicy:
        if timeout is None:
            return self.wait_policy
        return self.wait_policy.with_timeout(timeout)

    def _act_when(
            self,
            target: Target,
            condition: Callable[[WebElement], bool],
            action: Callable[[WebElement], Any],
            *,
            name: Optional[str] = None,
            timeout: Optional[float] = None,
            fallback: Optional[Callable[[WebElement], Any]] = None,
    ):
        return wait_and_act(
            self._resolver(target),
            condition,
            action,
            self._policy(timeout),
            description=self._describe(target, name),
            fallback=fallback,
            logger=self.logger,
        )

    def _find(self, target: Target, timeout: Optional[float] = None) -> WebElement:
        return self._act_when(target, is_present, lambda el: el, timeout=timeout)

    # ----------------------------------------------------------------------
    #  navigation
    # ----------------------------------------------------------------------
    @allure.step("Navigate to URL: {url}")
    def navigate_to(self, url: str, name: Optional[str] = None) -> None:
        log_text = name if name else url
        self.logger.info(f'Navigating to "{log_text}"')
        self.driver.get(url)

    @allure.step("Navigate to base URL")
    def navigate_to_base_url(self) -> None:
        if not self.base_url:
            raise ParameterMissingError(
                '"base_url" is neither passed nor set in the config'
            )
        self.navigate_to(self.base_url)

    @allure.step("Refresh page")
    def refresh_page(self) -> None:
        self.driver.refresh()
        self.logger.debug("Page refreshed")

    @allure.step("Navigate back")
    def navigate_back(self) -> None:
        self.driver.back()
        self.logger.debug("Navigated back")

    @allure.step("Navigate forward")
    def navigate_forward(self) -> None:
        self.driver.forward()
        self.logger.debug("Navigated forward")

    def get_current_url(self) -> str:
        current_url = self.driver.current_url
        self.logger.debug(f"Current URL: {current_url}")
        return current_url

    def get_page_title(self) -> str:
        title = self.driver.title
        self.logger.debug(f"Page title: {title}")
        return title

    # ----------------------------------------------------------------------
    #  waits
    # ----------------------------------------------------------------------
    @allure.step("Wait for element to be clickable: {target}")
    def wait_for_element_to_be_clickable(
            self,
            target: Target,
            timeout: Optional[float] = None,
            *,
            name: Optional[str] = None,
    ) -> WebElement:
        """
        Wait until the element is displayed and enabled and return it.

        :raises ConditionTimeoutError: when it does not become clickable in time
        """
        self.logger.debug(
            f'Waiting for element "{self._describe(target, name)}" to be clickable'
        )
        return self._act_when(
            target, is_clickable, lambda el: el, name=name, timeout=timeout
        )

    @allure.step("Wait for element to be visible: {target}")
    def wait_for_element_to_be_visible(
            self,
            target: Target,
            timeout: Optional[float] = None,
            *,
            name: Optional[str] = None,
    ) -> WebElement:
        """
        Wait until the element is displayed and return it.

        :raises ConditionTimeoutError: when it does not become visible in time
        """
        self.logger.debug(
            f'Waiting for element "{self._describe(target, name)}" to be visible'
        )
        return self._act_when(
            target, is_visible, lambda el: el, name=name, timeout=timeout
        )

    @allure.step("Check if element is displayed: {target}")
    def is_element_displayed(
            self,
            target: Target,
            timeout: Optional[float] = None,
            *,
            name: Optional[str] = None,
    ) -> bool:
        """
        Check whether the element is displayed.

        Without ``timeout`` this is a single check; with it, the element is
        waited for and False is returned once the timeout elapses. A missing
        or stale element counts as not displayed.
        """
        log_text = self._describe(target, name)
        if timeout is None:
            try:
                is_displayed = self._resolver(target)().is_displayed()
            except Exception as exc:  # noqa: classified below
                if classify_failure(exc) not in TRANSIENT_KINDS:
                    raise
                self.logger.debug(f'Element "{log_text}" is not displayed')
                return False
            self.logger.debug(f'Element "{log_text}" is displayed: {is_displayed}')
            return is_displayed
        try:
            poll_until(
                self._resolver(target),
                is_visible,
                self._policy(timeout),
                description=log_text,
            )
        except ConditionTimeoutError:
            self.logger.debug(f'Element "{log_text}" is not displayed after waiting')
            return False
        self.logger.debug(f'Element "{log_text}" is displayed after waiting')
        return True

    @allure.step("Wait for element to disappear: {locator}")
    def wait_for_element_to_disappear(
            self,
            locator: Union[Locator, tuple, str],
            timeout: Optional[float] = None,
            *,
            name: Optional[str] = None,
    ) -> bool:
        locator = to_locator(locator)
        log_text = name or str(locator)
        policy = self._policy(timeout)
        self.logger.debug(f'Waiting for "{log_text}" to disappear')
        try:
            WebDriverWait(
                self.driver, policy.timeout, poll_frequency=policy.poll_interval
            ).until(EC.invisibility_of_element_located(locator))
        except TimeoutException:
            self.logger.debug(f'"{log_text}" did NOT disappear in {policy.timeout}s')
            return False
        self.logger.debug(f'"{log_text}" disappeared')
        return True

    @allure.step("Wait for condition: {description}")
    def wait_for(
            self,
            condition: Callable,
            timeout: Optional[float] = None,
            description: str = "condition",
    ):
        """
        Wait until ``condition(driver)`` returns something truthy and return it.

        :raises ConditionTimeoutError: carrying ``description`` on timeout
        """
        policy = self._policy(timeout)
        return wait_for(
            self.driver,
            condition,
            policy.timeout,
            description,
            poll_interval=policy.poll_interval,
            logger=self.logger,
        )

    @allure.step("Check if page title contains: {expected_title}")
    def page_title_contains(
            self, expected_title: str, timeout: Optional[float] = None
    ) -> bool:
        try:
            self.wait_for(
                EC.title_contains(expected_title),
                timeout,
                f'page title to contain "{expected_title}"',
            )
        except ConditionTimeoutError:
            self.logger.debug(f"Page title does not contain: '{expected_title}'")
            return False
        self.logger.debug(f"Page title contains: '{expected_title}'")
        return True

    @allure.step("Wait for page to load completely")
    def wait_for_page_to_load(self, timeout: Optional[float] = None) -> None:
        self.wait_for(
            lambda driver: remote_scripts.DOCUMENT_READY_STATE.run(driver)
            == "complete",
            timeout,
            "document.readyState to be complete",
        )
        self.logger.debug("Page loaded completely")

    # ----------------------------------------------------------------------
    #  element interaction
    # ----------------------------------------------------------------------
    @allure.step("Click on element: {target}")
    def click(
            self,
            target: Target,
            timeout: Optional[float] = None,
            *,
            name: Optional[str] = None,
    ) -> None:
        """
        Click the element once it is clickable.

        A stale element is looked up again and clicked once more; a click
        intercepted by another element is replaced by a JavaScript click.
        """
        log = self._describe(target, name)
        self.logger.debug(f'Clicking on "{log}"')
        self._act_when(
            target,
            is_clickable,
            lambda el: el.click(),
            name=name,
            timeout=timeout,
            fallback=lambda el: remote_scripts.JS_CLICK.run(self.driver, el),
        )
        self.logger.debug(f'Successfully clicked "{log}"')

    @allure.step("JavaScript click on element: {target}")
    def js_click(
            self,
            target: Target,
            timeout: Optional[float] = None,
            *,
            name: Optional[str] = None,
    ) -> None:
        log = self._describe(target, name)
        self.logger.debug(f'JavaScript click on "{log}"')
        self._act_when(
            target,
            is_visible,
            lambda el: remote_scripts.JS_CLICK.run(self.driver, el),
            name=name,
            timeout=timeout,
        )

    @allure.step("Type text into element: {target}")
    def type(
            self,
            target: Target,
            text: str,
            timeout: Optional[float] = None,
            *,
            sensitive: bool = False,
            name: Optional[str] = None,
    ) -> None:
        """
        Clear the element and type ``text`` into it once it is visible.

        Parameters:
            target: The element to type into.
            text: The text to set.
            timeout: Overrides the page's default wait.
            sensitive: Mask the text in log messages.
            name: An optional name for logging purposes.
        """
        log_text_ = text if not sensitive else "********"
        log_text = self._describe(target, name)

        def _type(element: WebElement) -> None:
            element.clear()
            element.send_keys(text)

        self._act_when(target, is_visible, _type, name=name, timeout=timeout)
        self.logger.debug(f'Typed text "{log_text_}" into element "{log_text}"')

    @allure.step("Clear text from element: {target}")
    def clear(
            self,
            target: Target,
            timeout: Optional[float] = None,
            *,
            name: Optional[str] = None,
    ) -> None:
        self._act_when(
            target, is_visible, lambda el: el.clear(), name=name, timeout=timeout
        )
        self.logger.debug(
            f'Cleared text from element "{self._describe(target, name)}"'
        )

    @allure.step("Get text from element: {target}")
    def get_text(
            self,
            target: Target,
            timeout: Optional[float] = None,
            *,
            name: Optional[str] = None,
    ) -> str:
        text = self._act_when(
            target, is_visible, lambda el: el.text, name=name, timeout=timeout
        )
        self.logger.debug(
            f'Got text "{text}" from element "{self._describe(target, name)}"'
        )
        return text

    @allure.step("Hover over element: {target}")
    def hover_over(self, target: Target, *, name: Optional[str] = None) -> None:
        self._act_when(
            target,
            is_visible,
            lambda el: ActionChains(self.driver).move_to_element(el).perform(),
            name=name,
        )
        self.logger.debug(f'Hovering over element "{self._describe(target, name)}"')

    @allure.step("Drag element: {source} and drop to: {destination}")
    def drag_and_drop(self, source: Target, destination: Target) -> None:
        source_element = self.wait_for_element_to_be_visible(source)
        destination_element = self.wait_for_element_to_be_visible(destination)
        ActionChains(self.driver).drag_and_drop(
            source_element, destination_element
        ).perform()
        self.logger.debug(
            f'Dragged element "{self._describe(source)}" and dropped to '
            f'"{self._describe(destination)}"'
        )

    @allure.step("Drag element: {target} and drop by offset: ({x_offset}, {y_offset})")
    def drag_and_drop_by_offset(
            self, target: Target, x_offset: int, y_offset: int
    ) -> None:
        self._act_when(
            target,
            is_visible,
            lambda el: ActionChains(self.driver)
            .drag_and_drop_by_offset(el, x_offset, y_offset)
            .perform(),
        )
        self.logger.debug(
            f'Dragged element "{self._describe(target)}" and dropped by '
            f"offset: ({x_offset}, {y_offset})"
        )

    @allure.step("Scroll to element: {target}")
    def scroll_to_element(self, target: Target, *, name: Optional[str] = None) -> None:
        log_text = self._describe(target, name)
        self.logger.debug(f"Scrolling to element {log_text}")
        self._act_when(
            target,
            is_present,
            lambda el: remote_scripts.SCROLL_INTO_VIEW.run(self.driver, el),
            name=name,
        )
        self.logger.debug(f"Successfully scrolled to element {log_text}")

    @allure.step("Get all elements by locator: {locator}")
    def find_elements(self, locator: Union[Locator, tuple, str]) -> List[WebElement]:
        locator = to_locator(locator)
        elements = self.driver.find_elements(*locator)
        self.logger.debug(f"Found {len(elements)} elements with locator: {locator}")
        return elements

    # ----------------------------------------------------------------------
    #  dropdowns
    # ----------------------------------------------------------------------
    def _select(self, target: Target, method: str, option: str, name: Optional[str]):
        log_text = self._describe(target, name)

        def _do_select(element: WebElement) -> None:
            try:
                getattr(Select(element), method)(option)
            except NoSuchElementException as er:
                raise SelectionNotFoundError(
                    f'desired selection "{option}" on the element "{log_text}" '
                    f"{method} not available"
                ) from er

        self._act_when(target, is_visible, _do_select, name=name)
        self.logger.debug(f'Selected "{option}" {method} from dropdown "{log_text}"')

    @allure.step("Select option by text: {text} from dropdown: {target}")
    def select_by_visible_text(
            self, target: Target, text: str, *, name: Optional[str] = None
    ) -> None:
        self._select(target, "select_by_visible_text", text, name)

    @allure.step("Select option by value: {value} from dropdown: {target}")
    def select_by_value(
            self, target: Target, value: str, *, name: Optional[str] = None
    ) -> None:
        self._select(target, "select_by_value", value, name)

    @allure.step("Get selected option text from dropdown: {target}")
    def get_selected_option_text(
            self, target: Target, *, name: Optional[str] = None
    ) -> str:
        text = self._act_when(
            target,
            is_visible,
            lambda el: Select(el).first_selected_option.text,
            name=name,
        )
        self.logger.debug(
            f'Selected option text "{text}" from dropdown '
            f'"{self._describe(target, name)}"'
        )
        return text

    # ----------------------------------------------------------------------
    #  frames
    # ----------------------------------------------------------------------
    @allure.step("Switch to frame: {frame}")
    def switch_to_frame(
            self,
            frame: Union[int, str, Locator, tuple, WebElement],
            timeout: Optional[float] = None,
    ) -> None:
        """
        Method to switch control to a frame
        :param frame: index as int, name or id as string, or an XPath string /
            Locator / WebElement of the frame to wait for before switching
        :param timeout: maximum time to wait for a located frame
        :return: None
        """
        if isinstance(frame, str) and to_locator(frame).by == By.XPATH:
            frame = to_locator(frame)
        if isinstance(frame, (int, str)):
            self.driver.switch_to.frame(frame)
        else:
            if isinstance(frame, tuple):
                frame = to_locator(frame)
            self.wait_for(
                EC.frame_to_be_available_and_switch_to_it(frame),
                timeout,
                f"frame {frame} to be available",
            )
        self.logger.debug(f"Switched to frame: {frame}")

    @allure.step("Switch to default content")
    def switch_to_default_content(self) -> None:
        self.driver.switch_to.default_content()
        self.logger.debug("Switched to default content")

    @allure.step("Switch to parent frame")
    def switch_to_parent_frame(self) -> None:
        self.driver.switch_to.parent_frame()
        self.logger.debug("Switched to parent frame")

    # ----------------------------------------------------------------------
    #  alerts
    # ----------------------------------------------------------------------
    def _wait_for_alert(self, timeout: Optional[float] = None):
        return self.wait_for(EC.alert_is_present(), timeout, "alert to be present")

    @allure.step("Handle alert with action: {accept}")
    def handle_alert(self, accept: bool = True, timeout: Optional[float] = None) -> str:
        """
        Wait for an alert, accept or dismiss it and return its text.
        """
        alert = self._wait_for_alert(timeout)
        alert_text = alert.text
        if accept:
            alert.accept()
            self.logger.debug(f"Alert accepted with text: {alert_text}")
        else:
            alert.dismiss()
            self.logger.debug(f"Alert dismissed with text: {alert_text}")
        return alert_text

    @allure.step("Handle prompt with text: {input_text}")
    def handle_prompt(
            self,
            input_text: Optional[str] = None,
            accept: bool = True,
            timeout: Optional[float] = None,
    ) -> str:
        prompt = self._wait_for_alert(timeout)
        prompt_text = prompt.text
        if input_text is not None:
            prompt.send_keys(input_text)
        if accept:
            prompt.accept()
            self.logger.debug(f"Prompt accepted with text: {prompt_text}")
        else:
            prompt.dismiss()
            self.logger.debug(f"Prompt dismissed with text: {prompt_text}")
        return prompt_text

    # ----------------------------------------------------------------------
    #  windows
    # ----------------------------------------------------------------------
    def get_current_window_handle(self) -> str:
        return self.driver.current_window_handle

    def get_all_window_handles(self) -> List[str]:
        return list(self.driver.window_handles)

    @allure.step("Switch to window with handle: {window_handle}")
    def switch_to_window(self, window_handle: str) -> None:
        self.driver.switch_to.window(window_handle)
        self.logger.debug(f"Switched to window with handle: {window_handle}")

    @allure.step("Switch to new window")
    def switch_to_new_window(self, current_window_handle: str) -> str:
        """
        Switch to the first window that is not ``current_window_handle``.

        There is no waiting here; use
        :func:`page_actions.window_utils.wait_for_new_window` when the
        window opens asynchronously.

        :raises NoSuchWindowException: when no other window exists
        """
        new_window_handle = next(
            (
                handle
                for handle in self.driver.window_handles
                if handle != current_window_handle
            ),
            None,
        )
        if new_window_handle is None:
            raise NoSuchWindowException("No new window found")
        self.switch_to_window(new_window_handle)
        return new_window_handle

    @allure.step("Close current window and switch to parent: {parent_window_handle}")
    def close_window_and_switch_to_parent(self, parent_window_handle: str) -> None:
        self.driver.close()
        self.switch_to_window(parent_window_handle)
        self.logger.debug(
            f"Closed current window and switched to parent: {parent_window_handle}"
        )

    # ----------------------------------------------------------------------
    #  Shadow DOM
    # ----------------------------------------------------------------------
    @allure.step("Get Shadow Root of element: {host}")
    def get_shadow_root(self, host: Target):
        """Return the host's shadow root, or None when it has none."""
        return remote_scripts.SHADOW_ROOT.run(self.driver, self._find(host))

    def _require_shadow_root(self, host: Target):
        shadow_root = self.get_shadow_root(host)
        if shadow_root is None:
            raise WebElementNotFoundError(
                f"Shadow root is null for host element: {self._describe(host)}"
            )
        return shadow_root

    @allure.step("Find element in Shadow DOM with selector: {css_selector}")
    def find_element_in_shadow_dom(self, host: Target, css_selector: str) -> WebElement:
        return self._require_shadow_root(host).find_element(
            By.CSS_SELECTOR, css_selector
        )

    @allure.step("Find elements in Shadow DOM with selector: {css_selector}")
    def find_elements_in_shadow_dom(
            self, host: Target, css_selector: str
    ) -> List[WebElement]:
        return self._require_shadow_root(host).find_elements(
            By.CSS_SELECTOR, css_selector
        )

    @allure.step("Find element in nested Shadow DOM")
    def find_element_in_nested_shadow_dom(
            self, root_host: Target, *selectors: str
    ) -> WebElement:
        """
        Descend through nested shadow roots.

        Every selector but the last locates the next shadow host inside the
        current shadow root; the last one locates the element returned.
        """
        if not selectors:
            raise ParameterMissingError("At least one selector must be provided")

        context = self._require_shadow_root(root_host)
        element = None
        for index, selector in enumerate(selectors):
            element = context.find_element(By.CSS_SELECTOR, selector)
            if index < len(selectors) - 1:
                context = remote_scripts.SHADOW_ROOT.run(self.driver, element)
                if context is None:
                    raise WebElementNotFoundError(
                        f'Shadow root is null for element "{selector}"'
                    )
        return element

    @allure.step("Type text: {text} into Shadow DOM element")
    def type_in_shadow_dom(self, host: Target, css_selector: str, text: str) -> None:
        element = self.find_element_in_shadow_dom(host, css_selector)
        element.clear()
        element.send_keys(text)
        self.logger.debug(
            f"Typed text: '{text}' into Shadow DOM element: {css_selector}"
        )

    @allure.step("Click on element in Shadow DOM")
    def click_in_shadow_dom(self, host: Target, css_selector: str) -> None:
        self.find_element_in_shadow_dom(host, css_selector).click()
        self.logger.debug(f"Clicked on element in Shadow DOM: {css_selector}")

    @allure.step("JavaScript click on element in Shadow DOM")
    def js_click_in_shadow_dom(self, host: Target, css_selector: str) -> None:
        element = self.find_element_in_shadow_dom(host, css_selector)
        remote_scripts.JS_CLICK.run(self.driver, element)
        self.logger.debug(
            f"JavaScript clicked on element in Shadow DOM: {css_selector}"
        )

    @allure.step("Get text from element in Shadow DOM")
    def get_text_from_shadow_dom(self, host: Target, css_selector: str) -> str:
        text = self.find_element_in_shadow_dom(host, css_selector).text
        self.logger.debug(
            f"Got text: '{text}' from element in Shadow DOM: {css_selector}"
        )
        return text

    @allure.step("Wait for Shadow DOM to be attached to host element")
    def wait_for_shadow_dom(self, host: Target, timeout: Optional[float] = None) -> None:
        self.wait_for(
            lambda driver: self.get_shadow_root(host) is not None,
            timeout,
            f"shadow root of {self._describe(host)}",
        )
        self.logger.debug(f"Shadow DOM attached to host element: {self._describe(host)}")

    @allure.step("Wait for element to be visible in Shadow DOM")
    def wait_for_element_in_shadow_dom(
            self,
            host: Target,
            css_selector: str,
            timeout: Optional[float] = None,
    ) -> WebElement:
        """
        Wait for the shadow root, then for ``css_selector`` inside it to be
        displayed. Missing and stale elements are polled through.
        """
        self.wait_for_shadow_dom(host, timeout)
        policy = self.fluent_policy
        if timeout is not None:
            policy = policy.with_timeout(timeout)
        return poll_until(
            lambda: self.find_element_in_shadow_dom(host, css_selector),
            is_visible,
            policy,
            description=f'"{css_selector}" in Shadow DOM',
        )

    @allure.step("Execute JavaScript in Shadow DOM context")
    def execute_js_in_shadow_dom(self, host: Target, expression: str, *args):
        """
        Evaluate ``shadowRoot.<expression>`` on the host and return the result.
        Extra ``args`` are available as ``arguments[1]`` onwards.
        """
        return remote_scripts.shadow_expression(expression).run(
            self.driver, self._find(host), *args
        )

    @allure.step("Find all elements matching selector in all Shadow DOMs: {selector}")
    def find_all_elements_in_all_shadow_doms(self, selector: str) -> List[WebElement]:
        elements = remote_scripts.ALL_SHADOW_ELEMENTS.run(self.driver, selector)
        self.logger.debug(
            f"Found {len(elements)} elements in all Shadow DOMs matching: {selector}"
        )
        return elements

    # ----------------------------------------------------------------------
    #  canvas
    # ----------------------------------------------------------------------
    def click_on_canvas(self, canvas: Target, x: int, y: int) -> None:
        canvas_utils.click_on_canvas(
            self.driver, self.wait_for_element_to_be_visible(canvas), x, y
        )

    def drag_on_canvas(
            self, canvas: Target, start_x: int, start_y: int, end_x: int, end_y: int
    ) -> None:
        canvas_utils.drag_on_canvas(
            self.driver,
            self.wait_for_element_to_be_visible(canvas),
            start_x,
            start_y,
            end_x,
            end_y,
        )

    @allure.step("Execute function on Canvas context")
    def execute_canvas_function(self, canvas: Target, function_script: str):
        """
        Run ``function_script`` with ``canvas`` and its 2D ``ctx`` in scope.
        """
        script = remote_scripts.RemoteScript(
            "canvas function",
            remote_scripts.CANVAS_FUNCTION_PREFIX + function_script,
        )
        return script.run(self.driver, self._find(canvas))

    def get_canvas_pixel(self, canvas: Target, x: int, y: int) -> Optional[Rgba]:
        return canvas_utils.get_pixel_color_at_coordinates(
            self.driver, self._find(canvas), x, y
        )

    # ----------------------------------------------------------------------
    #  time manipulation
    # ----------------------------------------------------------------------
    def override_javascript_date(self, date_string: str) -> None:
        time_utils.set_browser_date_time(self.driver, date_string)

    def reset_javascript_date(self) -> None:
        time_utils.reset_browser_date_time(self.driver)

    def set_timezone_offset(self, offset_minutes: int) -> None:
        time_utils.set_browser_timezone_offset(self.driver, offset_minutes)

    def reset_timezone_offset(self) -> None:
        time_utils.reset_browser_timezone_offset(self.driver)

    # ----------------------------------------------------------------------
    #  screenshots
    # ----------------------------------------------------------------------
    @allure.step("Take screenshot with name: {screenshot_name}")
    def take_screenshot(self, screenshot_name: str) -> Optional[str]:
        return screenshot_utils.take_screenshot(
            self.driver, screenshot_name, self.config.screenshot_dir
        )
