import enum
import os
import threading
from typing import List, Optional

from loguru import logger
from selenium import webdriver
from selenium.webdriver.chrome.service import Service as ChromeService
from selenium.webdriver.edge.service import Service as EdgeService
from selenium.webdriver.firefox.options import Options as FirefoxOptions
from selenium.webdriver.firefox.service import Service as FirefoxService

from .config_reader import FrameworkConfig, get_config_data


class Browser(enum.Enum):
    """Enum for first-class browser support."""

    CHROME = "chrome"
    FIREFOX = "firefox"
    EDGE = "edge"
    SAFARI = "safari"

    @classmethod
    def from_name(cls, name: "str | Browser") -> "Browser":
        if isinstance(name, Browser):
            return name
        try:
            return cls(name.strip().lower())
        except ValueError:
            logger.warning(f"Unknown browser '{name}', defaulting to Chrome")
            return cls.CHROME


def _validate_driver(path: Optional[str], label: str) -> str:
    if path and os.path.isfile(path):
        return path
    raise FileNotFoundError(f"{label} not found: {path!s}")


def _validate_download_path(download_path: Optional[str]) -> Optional[str]:
    """Ensure download directory exists or create it."""
    if download_path is None:
        return None  # Let the browser fall back to default
    download_path = os.path.abspath(download_path)
    os.makedirs(download_path, exist_ok=True)
    return download_path


def get_chrome_options(
        *,
        headless: bool = False,
        binary_path: Optional[str] = None,
        download_path: Optional[str] = None,
        proxy_address: Optional[str] = None,
        proxy_port: Optional[str] = None,
        arguments: Optional[List[str]] = None,
        experimental_options: Optional[dict] = None,
        edge: bool = False,
):
    """Return fully-configured Chrome (or Edge) options."""
    options = webdriver.EdgeOptions() if edge else webdriver.ChromeOptions()
    if binary_path:
        options.binary_location = binary_path
    if headless:
        options.add_argument("--headless=new")
    options.add_argument("--start-maximized")

    if download_path:
        options.add_experimental_option(
            "prefs",
            {
                "download.default_directory": download_path,
                "download.prompt_for_download": False,
                "download.directory_upgrade": True,
            },
        )
    if proxy_address and proxy_port:
        options.add_argument(f"--proxy-server={proxy_address}:{proxy_port}")

    if not edge:
        options.add_argument("--remote-allow-origins=*")
        # Shadow DOM and cross-frame helpers need relaxed isolation
        options.add_argument("--disable-web-security")
        options.add_argument("--disable-site-isolation-trials")

    for arg in dict.fromkeys(arguments or []):
        options.add_argument(arg)
    for key, value in (experimental_options or {}).items():
        options.add_experimental_option(key, value)

    # Reduce noisy DevTools logs
    options.add_experimental_option("excludeSwitches", ["enable-logging"])
    return options


def get_firefox_options(
        *,
        headless: bool = False,
        binary_path: Optional[str] = None,
        download_path: Optional[str] = None,
        proxy_address: Optional[str] = None,
        proxy_port: Optional[str] = None,
        arguments: Optional[List[str]] = None,
) -> FirefoxOptions:
    """
    Return configured FirefoxOptions so that downloads go straight into
    ``download_path`` without a prompt.
    """
    opts = webdriver.FirefoxOptions()
    if binary_path:
        opts.binary_location = binary_path
    if headless:
        opts.add_argument("--headless")

    if download_path:
        opts.set_preference("browser.download.folderList", 2)
        opts.set_preference("browser.download.dir", download_path)
        opts.set_preference("browser.download.useDownloadDir", True)
        opts.set_preference(
            "browser.helperApps.neverAsk.saveToDisk",
            "text/csv,application/csv,application/octet-stream",
        )
        opts.set_preference("browser.download.manager.showWhenStarting", False)
        opts.set_preference("pdfjs.disabled", True)

    if proxy_address and proxy_port:
        opts.set_preference("network.proxy.type", 1)
        opts.set_preference("network.proxy.http", proxy_address)
        opts.set_preference("network.proxy.http_port", int(proxy_port))
        opts.set_preference("network.proxy.ssl", proxy_address)
        opts.set_preference("network.proxy.ssl_port", int(proxy_port))

    for arg in arguments or []:
        opts.add_argument(arg)
    return opts


def create_driver(
        config: Optional[FrameworkConfig] = None,
        *,
        driver_path: Optional[str] = None,
        binary_path: Optional[str] = None,
        experimental_options: Optional[dict] = None,
):
    """
    Return a ready WebDriver for the configured browser.

    Selenium Manager resolves the driver binary unless ``driver_path`` is
    given. Implicit wait, page load and script timeouts come from the
    config; the window is maximised when not headless.
    """
    config = config or get_config_data()
    browser = Browser.from_name(config.browser)
    download_path = _validate_download_path(config.download_dir)
    logger.info(
        f"Initializing {browser.value} browser (headless: {config.headless})"
    )

    if browser in (Browser.CHROME, Browser.EDGE):
        is_edge = browser is Browser.EDGE
        options = get_chrome_options(
            headless=config.headless,
            binary_path=binary_path,
            download_path=download_path,
            proxy_address=config.proxy_address,
            proxy_port=config.proxy_port,
            arguments=config.arguments,
            experimental_options=experimental_options,
            edge=is_edge,
        )
        service_cls, driver_cls = (
            (EdgeService, webdriver.Edge) if is_edge
            else (ChromeService, webdriver.Chrome)
        )
        if driver_path:
            service = service_cls(
                executable_path=_validate_driver(driver_path, f"{browser.value} driver")
            )
            driver = driver_cls(service=service, options=options)
        else:
            driver = driver_cls(options=options)
    elif browser is Browser.FIREFOX:
        options = get_firefox_options(
            headless=config.headless,
            binary_path=binary_path,
            download_path=download_path,
            proxy_address=config.proxy_address,
            proxy_port=config.proxy_port,
            arguments=config.arguments,
        )
        if driver_path:
            service = FirefoxService(
                executable_path=_validate_driver(driver_path, "Gecko driver")
            )
            driver = webdriver.Firefox(service=service, options=options)
        else:
            driver = webdriver.Firefox(options=options)
    else:
        driver = webdriver.Safari()

    configure_timeouts(driver, config)
    if not config.headless:
        try:
            driver.maximize_window()
        except Exception as er:  # noqa: some drivers refuse early in startup
            logger.debug(f"Could not maximize window: {er}")
    logger.info("WebDriver initialized successfully")
    return driver


def configure_timeouts(driver, config: FrameworkConfig) -> None:
    driver.implicitly_wait(config.implicit_wait)
    driver.set_page_load_timeout(config.page_load_timeout)
    driver.set_script_timeout(config.script_timeout)


class DriverFactory:
    """
    One WebDriver per thread, created lazily from configuration.
    """

    _local = threading.local()

    @classmethod
    def get_driver(cls, config: Optional[FrameworkConfig] = None):
        driver = getattr(cls._local, "driver", None)
        if driver is None:
            driver = create_driver(config)
            cls._local.driver = driver
        return driver

    @classmethod
    def quit_driver(cls) -> None:
        driver = getattr(cls._local, "driver", None)
        if driver is not None:
            logger.info("Quitting WebDriver instance")
            try:
                driver.quit()
            finally:
                cls._local.driver = None
