"""Dispatch contract, the route dispatcher, and generic screens."""

from trill.dispatch.dispatcher import Dispatcher, RouteDispatcher
from trill.dispatch.result import (
    DispatchRequest,
    DispatchResult,
    Failed,
    Found,
    Missing,
    Outcome,
)
from trill.dispatch.screens import ScreenRegistry

__all__ = [
    "DispatchRequest",
    "DispatchResult",
    "Dispatcher",
    "Failed",
    "Found",
    "Missing",
    "Outcome",
    "RouteDispatcher",
    "ScreenRegistry",
]
