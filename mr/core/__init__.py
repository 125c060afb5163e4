"""Core domain types: configuration, results, exit codes."""

from .config import Config, ConfigError, load_config
from .errors import ErrorCode
from .result import Err, Ok, Result, Skip, is_err, is_ok, is_skip

__all__ = [
    # config
    "Config",
    "ConfigError",
    "load_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
    "Skip",
    "is_err",
    "is_ok",
    "is_skip",
]
