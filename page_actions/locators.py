from typing import NamedTuple, Tuple, Union

from selenium.webdriver.common.by import By
from selenium.webdriver.remote.webelement import WebElement


class Locator(NamedTuple):
    """
    Immutable ``(by, value)`` query, usable anywhere Selenium expects a
    locator tuple (``driver.find_element(*locator)``).
    """

    by: str
    value: str

    @classmethod
    def css(cls, selector: str) -> "Locator":
        return cls(By.CSS_SELECTOR, selector)

    @classmethod
    def xpath(cls, expression: str) -> "Locator":
        return cls(By.XPATH, expression)

    @classmethod
    def id(cls, element_id: str) -> "Locator":
        return cls(By.ID, element_id)

    @classmethod
    def name(cls, element_name: str) -> "Locator":
        return cls(By.NAME, element_name)

    @classmethod
    def parse(cls, element: str) -> "Locator":
        """
        Method to find the passed element is an ID or XPATH
        :param element: an XPATH or ID of the WebElement as string
        :return: Locator
        """
        if element.startswith(r"//") or element.startswith(r"("):
            return cls.xpath(element)
        return cls.id(element)

    def __str__(self) -> str:
        return f"{self.by}={self.value}"


Target = Union[Locator, Tuple[str, str], str, WebElement]


def to_locator(target: Union[Locator, Tuple[str, str], str]) -> Locator:
    """Normalise a bare string or ``(by, value)`` tuple into a Locator."""
    if isinstance(target, Locator):
        return target
    if isinstance(target, str):
        return Locator.parse(target)
    by, value = target
    return Locator(by, value)


def is_locator(target) -> bool:
    return isinstance(target, (str, tuple))
