"""
Custom exception hierarchy for ergogen-router.

Provides consistent error handling with context, suggestions, and actionable guidance.
All exceptions include:
- Context information (route string, character position, etc.)
- Suggestions for how to fix the issue
- Clear, formatted error messages

Example::

    from ergogen_router.exceptions import RouteSyntaxError

    raise RouteSyntaxError(
        "Unsupported character 'q' at position 6",
        route="f(0,0)q",
        position=6,
        character="q",
    )
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union


class RouterError(Exception):
    """
    Base exception for all ergogen-router errors.

    Provides consistent formatting with context and suggestions.

    Attributes:
        context: Dictionary of contextual information (route, position, etc.)
        suggestions: List of actionable suggestions for fixing the error
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
    ):
        self.message = message
        self.context = context or {}
        self.suggestions = suggestions or []
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context and suggestions."""
        parts = [self.message]

        if self.context:
            parts.append("\n\nContext:")
            for key, value in self.context.items():
                parts.append(f"\n  {key}: {value}")

        if self.suggestions:
            parts.append("\n\nSuggestions:")
            for suggestion in self.suggestions:
                parts.append(f"\n  - {suggestion}")

        return "".join(parts)

    def __str__(self) -> str:
        return self._format_message()


class RouteError(RouterError):
    """
    A route string could not be interpreted.

    Common parent of the route-level errors so callers can catch every
    failure of a single route with one clause.

    Attributes:
        route: The route string being interpreted
        position: Index of the offending character, if known
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        route: Optional[str] = None,
        position: Optional[int] = None,
    ):
        self.route = route
        self.position = position

        ctx = context or {}
        if route is not None and "route" not in ctx:
            ctx["route"] = route
        if position is not None and "position" not in ctx:
            ctx["position"] = position

        super().__init__(message, ctx, suggestions)


class RouteSyntaxError(RouteError):
    """
    Route string contains an unsupported character or an unclosed group.

    Example::

        raise RouteSyntaxError(
            "Unsupported character 'q' at position 6",
            route="f(0,0)q",
            position=6,
            character="q",
        )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        route: Optional[str] = None,
        position: Optional[int] = None,
        character: Optional[str] = None,
    ):
        self.character = character
        ctx = context or {}
        if character is not None and "character" not in ctx:
            ctx["character"] = repr(character)
        super().__init__(message, ctx, suggestions, route=route, position=position)


class RouteStateError(RouteError):
    """
    A command was used while the interpreter was not ready for it.

    Raised for a via with no cursor position, or a segment before any
    layer has been selected.
    """

    pass


class RouteValueError(RouteError):
    """
    A coordinate group or placement did not parse to the expected numbers.

    Attributes:
        text: The offending text
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        route: Optional[str] = None,
        position: Optional[int] = None,
        text: Optional[str] = None,
    ):
        self.text = text
        ctx = context or {}
        if text is not None and "text" not in ctx:
            ctx["text"] = text
        super().__init__(message, ctx, suggestions, route=route, position=position)


class UnsupportedFeatureError(RouteError):
    """
    The route uses a feature the host does not provide.

    Raised when a ``<net_name>`` command is reached but no net resolver
    was supplied to the interpreter.
    """

    pass


class NetLookupError(RouterError):
    """
    A net name could not be resolved.

    Example::

        raise NetLookupError(
            "Unknown net: ROW9",
            context={"net": "ROW9", "known": ["GND", "ROW0"]},
            suggestions=["Declare the net in the placement file 'nets' list"]
        )
    """

    pass


class ConfigurationError(RouterError):
    """
    Configuration or footprint parameter error.

    Raised when parameters are invalid, missing, or of the wrong type.
    """

    pass


class FileFormatError(RouterError):
    """
    Placement file not recognized or malformed.

    Attributes are the same as :class:`RouterError`; the file path is
    stored in ``context["file"]``.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        file_path: Optional[Union[str, Path]] = None,
    ):
        ctx = context or {}
        if file_path and "file" not in ctx:
            ctx["file"] = str(file_path)
        super().__init__(message, ctx, suggestions)


class FileNotFoundError(RouterError):
    """
    Required file was not found.

    Example::

        raise FileNotFoundError(
            "Placement file not found",
            context={"file": "keyboard.yaml"},
            suggestions=["Check the path passed on the command line"]
        )
    """

    pass


__all__ = [
    "RouterError",
    "RouteError",
    "RouteSyntaxError",
    "RouteStateError",
    "RouteValueError",
    "UnsupportedFeatureError",
    "NetLookupError",
    "ConfigurationError",
    "FileFormatError",
    "FileNotFoundError",
]
