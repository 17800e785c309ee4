"""Core interfaces/abstractions.

The core depends on these Protocols; adapters provide the concrete
implementations.
"""

from core.interfaces.collaborators import AuthenticatedFetch, ParameterValidator, UrlBuilder

__all__ = ["AuthenticatedFetch", "ParameterValidator", "UrlBuilder"]
