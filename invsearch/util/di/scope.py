"""Custom Dishka scopes for invsearch."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """invsearch dependency injection scopes.

    Hierarchy: APP -> SESSION

    - APP: Process lifetime (config, HTTP client, search service and its caches)
    - SESSION: One search view (its pipeline, form and view state)
    """

    APP = new_scope("APP")
    SESSION = new_scope("SESSION")
