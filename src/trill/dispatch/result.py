"""Dispatch outcomes.

A dispatcher answers every request with exactly one of three outcomes,
so callers branch on a tag instead of catching exceptions::

    match await dispatcher.dispatch(request):
        case Found(result):
            ...
        case Missing():
            ...
        case Failed(detail, cause):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from trill.exchange import Exchange
    from trill.tags.tag import Command


@dataclass(frozen=True, slots=True)
class DispatchRequest:
    """What a dispatcher is asked to resolve.

    ``event`` is set when the pipeline dispatches a client event and
    ``None`` for the primary page/service dispatch.
    """

    exchange: Exchange
    event: Command | None = None


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """A handler's return value and how to treat it.

    ``is_service`` results are raw API responses and are never wrapped
    in a page; the others are view models merged into one.
    """

    value: Any
    is_service: bool = False


@dataclass(frozen=True, slots=True)
class Found:
    result: DispatchResult


@dataclass(frozen=True, slots=True)
class Missing:
    """No handler matches. Not an error; the pipeline tries fallbacks."""


@dataclass(frozen=True, slots=True)
class Failed:
    """A handler matched but could not be invoked or raised."""

    detail: str
    cause: BaseException | None = None


type Outcome = Found | Missing | Failed
