"""Trie-based route matching for the route dispatcher."""

from trill.routing.route import Route, RouteMatch
from trill.routing.router import Router

__all__ = ["Route", "RouteMatch", "Router"]
