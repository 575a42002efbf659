"""
Browser automation for the challenge form.

Usage:
    from browser import BrowserClient, LoginPage, DynamicFormPage, PopupReconciler

    with BrowserClient() as browser:
        login = LoginPage(browser.page, config)
        login.goto()
        login.login(email, password)
"""

from .client import BrowserClient
from .config import ConfigError, Credentials, RunConfig, Timeouts, load_credentials
from .form_page import DynamicFormPage, FillResult
from .login_page import AuthenticationError, LoginPage
from .popup import PopupReconciler, handle_recaptcha
from .run_logger import RunLogger
from .waits import WaitTimeoutError

__all__ = [
    "BrowserClient",
    "ConfigError",
    "Credentials",
    "RunConfig",
    "Timeouts",
    "load_credentials",
    "DynamicFormPage",
    "FillResult",
    "AuthenticationError",
    "LoginPage",
    "PopupReconciler",
    "handle_recaptcha",
    "RunLogger",
    "WaitTimeoutError",
]
