"""
Error taxonomy for the register.it control panel automation.

Driver-level failures (selector waits, navigations, clicks) are classified
here into typed errors so that callers only ever see RegisterItError
subclasses.
"""

import logging
from contextlib import contextmanager
from typing import Optional

from playwright.sync_api import Error as PlaywrightError
from playwright.sync_api import TimeoutError as PlaywrightTimeout

logger = logging.getLogger(__name__)


class RegisterItError(Exception):
    """Base class for all control panel errors."""


class LoginExhaustedError(RegisterItError):
    """Raised when every allowed login attempt failed to reach the dashboard."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(
            f"Max login attempts reached ({attempts}), please try again later"
        )


class RecordNotFoundError(RegisterItError):
    """Raised when no DNS record row exists at the requested position."""

    def __init__(self, record_id=None):
        self.record_id = record_id
        super().__init__("DNS record not found")


class SessionClosedError(RegisterItError):
    """Raised when an operation is attempted on a closed session."""

    def __init__(self):
        super().__init__("Session has already been closed")


class NavigationError(RegisterItError):
    """A page interaction failed outside of the handled cases."""

    def __init__(self, message: str, action: str = "", selector: Optional[str] = None):
        self.action = action
        self.selector = selector
        super().__init__(message)


class SelectorTimeoutError(NavigationError):
    """A selector did not appear within the allowed time."""


class NavigationTimeoutError(NavigationError):
    """A page navigation or load-state wait timed out."""


SELECTOR_ACTIONS = {"wait_for_selector", "click", "type", "clear", "select_option"}


def classify_driver_error(
    error: Exception, action: str, selector: Optional[str] = None
) -> RegisterItError:
    """Map a driver exception to the error taxonomy."""
    if isinstance(error, RegisterItError):
        return error

    target = f" `{selector}`" if selector else ""
    if isinstance(error, PlaywrightTimeout):
        if action in SELECTOR_ACTIONS and selector:
            return SelectorTimeoutError(
                f"Timed out waiting for{target} during {action}",
                action=action,
                selector=selector,
            )
        return NavigationTimeoutError(
            f"Timed out during {action}{target}", action=action, selector=selector
        )

    if isinstance(error, PlaywrightError):
        return NavigationError(
            f"Page {action}{target} failed: {error}", action=action, selector=selector
        )

    return NavigationError(
        f"Unexpected failure during {action}{target}: {error}",
        action=action,
        selector=selector,
    )


@contextmanager
def translate_driver_errors(action: str, selector: Optional[str] = None):
    """Re-raise any driver failure inside the block as a classified error."""
    try:
        yield
    except RegisterItError:
        raise
    except Exception as e:
        classified = classify_driver_error(e, action, selector)
        logger.debug(f"{type(e).__name__} during {action} classified as {type(classified).__name__}")
        raise classified from e
