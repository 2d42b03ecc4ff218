from .locators import Locator
from .wait_and_act import (
    ConditionTimeoutError,
    FailureKind,
    WaitPolicy,
    WebElementNotFoundError,
    wait_and_act,
    wait_for,
)
from .web_actions import BasePage, ParameterMissingError, SelectionNotFoundError

__all__ = [
    "BasePage",
    "ConditionTimeoutError",
    "FailureKind",
    "Locator",
    "ParameterMissingError",
    "SelectionNotFoundError",
    "WaitPolicy",
    "WebElementNotFoundError",
    "wait_and_act",
    "wait_for",
]
