"""
Explicit waits with bounded recovery.

Everything in the page object that touches an element goes through
:func:`wait_and_act`: poll until the element is in the wanted state, act on
it once, retry the action once if the element went stale and fall back to an
alternate strategy once if the action was intercepted.
"""

import enum
import time
from dataclasses import dataclass, field, replace
from typing import Callable, FrozenSet, Optional, TypeVar

import loguru
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    ElementNotInteractableException,
    NoAlertPresentException,
    NoSuchElementException,
    NoSuchWindowException,
    StaleElementReferenceException,
    TimeoutException,
)
from selenium.webdriver.support.ui import WebDriverWait

T = TypeVar("T")
H = TypeVar("H")

DEFAULT_TIMEOUT = 10
DEFAULT_POLL_INTERVAL = 0.5


class ConditionTimeoutError(TimeoutException):
    """
    Raised when a waited-for condition did not hold within the timeout
    """

    def __init__(self, description: str, timeout: Optional[float] = None):
        self.description = description
        self.timeout = timeout
        message = f"Timeout waiting for: {description}"
        if timeout is not None:
            message += f" ({timeout}s)"
        super().__init__(message)


class WebElementNotFoundError(NoSuchElementException):
    """
    Custom Exception to raise when the WebElement not found
    """

    pass


class FailureKind(enum.Enum):
    """Tagged kinds of WebDriver failures the waits know how to treat."""

    NOT_FOUND = "not_found"
    STALE = "stale"
    INTERCEPTED = "intercepted"
    NOT_INTERACTABLE = "not_interactable"
    TIMEOUT = "timeout"
    NO_WINDOW = "no_window"
    NO_ALERT = "no_alert"


_FAILURE_KINDS = (
    (ElementClickInterceptedException, FailureKind.INTERCEPTED),
    (ElementNotInteractableException, FailureKind.NOT_INTERACTABLE),
    (StaleElementReferenceException, FailureKind.STALE),
    (NoSuchElementException, FailureKind.NOT_FOUND),
    (NoSuchWindowException, FailureKind.NO_WINDOW),
    (NoAlertPresentException, FailureKind.NO_ALERT),
    (TimeoutException, FailureKind.TIMEOUT),
)

TRANSIENT_KINDS: FrozenSet[FailureKind] = frozenset(
    {FailureKind.NOT_FOUND, FailureKind.STALE}
)


def classify_failure(exc: BaseException) -> Optional[FailureKind]:
    """
    Map an exception raised by the WebDriver client to its FailureKind.

    :param exc: exception instance
    :return: the matching FailureKind, or None for anything unrecognised
    """
    for exc_type, kind in _FAILURE_KINDS:
        if isinstance(exc, exc_type):
            return kind
    return None


@dataclass(frozen=True)
class WaitPolicy:
    """
    How long to wait, how often to poll and which failure kinds count as
    "not ready yet" while polling.
    """

    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    ignored: FrozenSet[FailureKind] = field(default=TRANSIENT_KINDS)

    def __post_init__(self):
        if self.timeout < 0:
            raise ValueError(f"timeout must not be negative, got {self.timeout}")
        if self.poll_interval <= 0:
            raise ValueError(
                f"poll_interval must be positive, got {self.poll_interval}"
            )
        object.__setattr__(self, "ignored", frozenset(self.ignored))

    def with_timeout(self, timeout: float) -> "WaitPolicy":
        return replace(self, timeout=timeout)

    def ignores(self, exc: BaseException) -> bool:
        return classify_failure(exc) in self.ignored


def _time_left(start: float, timeout: float) -> float:
    """Return seconds remaining before the absolute timeout expires."""
    remaining: float = float(timeout) - (time.monotonic() - start)
    return max(0.0, remaining)


def is_present(element) -> bool:
    return element is not None


def is_visible(element) -> bool:
    return element is not None and element.is_displayed()


def is_clickable(element) -> bool:
    return is_visible(element) and element.is_enabled()


def poll_until(
        resolve: Callable[[], H],
        condition: Callable[[H], bool],
        policy: WaitPolicy,
        *,
        description: str = "condition",
) -> H:
    """
    Poll ``resolve`` + ``condition`` until the condition holds and return
    the handle it held for.

    Failures whose kind is in ``policy.ignored`` are treated as "not yet";
    any other failure propagates straight away. The first evaluation always
    happens, whatever the timeout.
    """
    start = time.monotonic()
    while True:
        try:
            handle = resolve()
            if condition(handle):
                return handle
        except Exception as exc:  # noqa: classified below, re-raised unless ignored
            if not policy.ignores(exc):
                raise
        remaining = _time_left(start, policy.timeout)
        if remaining == 0:
            raise ConditionTimeoutError(description, policy.timeout)
        time.sleep(min(policy.poll_interval, remaining))


def wait_and_act(
        resolve: Callable[[], H],
        condition: Callable[[H], bool],
        action: Callable[[H], T],
        policy: WaitPolicy = WaitPolicy(),
        *,
        description: str = "element",
        fallback: Optional[Callable[[H], T]] = None,
        logger=None,
) -> T:
    """
    Wait for ``condition`` over the resolved handle, then run ``action`` on it.

    :param resolve: returns the current handle; called on every poll
    :param condition: predicate over the handle
    :param action: invoked once on the handle the condition held for
    :param policy: timeout, poll interval and ignored failure kinds
    :param description: human readable name of what is awaited, used in
        log messages and in ConditionTimeoutError
    :param fallback: alternate action used once when ``action`` is
        intercepted (e.g. a JavaScript click)
    :param logger: loguru compatible logger
    :return: whatever ``action`` (or ``fallback``) returns
    """
    logger = logger or loguru.logger
    handle = poll_until(resolve, condition, policy, description=description)
    try:
        return action(handle)
    except Exception as exc:  # noqa: only stale/intercepted are recovered
        kind = classify_failure(exc)
        if kind is FailureKind.STALE:
            logger.warning(f'"{description}" went stale, retrying once')
            # Only the action is retried, without the fallback; the condition
            # is not re-evaluated.
            return action(resolve())
        if kind is FailureKind.INTERCEPTED and fallback is not None:
            logger.warning(
                f'Action on "{description}" was intercepted, using fallback'
            )
            try:
                return fallback(handle)
            except Exception as fallback_exc:
                raise fallback_exc from exc
        raise


def wait_for(
        driver,
        condition: Callable,
        timeout: float = DEFAULT_TIMEOUT,
        description: str = "condition",
        *,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger=None,
):
    """
    Wait until ``condition(driver)`` returns a truthy value and return it.

    :raises ConditionTimeoutError: when the timeout elapses first
    """
    logger = logger or loguru.logger
    try:
        return WebDriverWait(driver, timeout, poll_frequency=poll_interval).until(
            condition
        )
    except ConditionTimeoutError:
        raise
    except TimeoutException as exc:
        logger.error(f"Timeout waiting for condition: {description}")
        raise ConditionTimeoutError(description, timeout) from exc
