"""
Type aliases shared across the library, with no runtime logic of their own.
"""
import logging
from typing import TYPE_CHECKING, Any, Union

# The stubs make the adapter generic, but it is not subscriptable at runtime in Python 3.8-3.10.
if TYPE_CHECKING:
    LoggerAdapter = logging.LoggerAdapter[Any]
else:
    LoggerAdapter = logging.LoggerAdapter

# Whatever can be passed to log the messages: a regular logger or an object-bound adapter.
Logger = Union[logging.Logger, LoggerAdapter]
