"""Routing — path templates, routes, mountable collections, and matching.

Routes are declared on mutable collections and frozen into one flat,
ordered, immutable table when the app boots.
"""

from monorail.routing.collection import RouteCollection
from monorail.routing.matcher import RequestMatcher
from monorail.routing.methods import MethodMatcher
from monorail.routing.pattern import CompiledPattern, PatternCompiler
from monorail.routing.route import Route, RouteMatch

__all__ = [
    "CompiledPattern",
    "MethodMatcher",
    "PatternCompiler",
    "RequestMatcher",
    "Route",
    "RouteCollection",
    "RouteMatch",
]
