"""View Registry.

Maps every ``ViewId`` to the factory that builds its frame.  The shell
asks the registry for a frame the first time a view is rendered and
caches the result.

Adding a new view = one ``register()`` call + one view class.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Optional, Union

from edunex.logger import StructuredLogger
from edunex.models.enums import ViewId

if TYPE_CHECKING:
    import customtkinter as ctk

ViewFactory = Callable[["ctk.CTkFrame"], "ctk.CTkFrame"]


class ViewEntry:
    """Metadata for a single registered view.

    Attributes
    ----------
    view_id:
        Which view this entry renders.
    title:
        Heading shown above the view's content.
    factory:
        Callable that receives the content container and returns the
        view's root frame.  Called lazily on first activation.
    """

    __slots__ = ("view_id", "title", "factory")

    def __init__(self, view_id: ViewId, title: str, factory: ViewFactory) -> None:
        self.view_id = view_id
        self.title = title
        self.factory = factory


class ViewRegistry:
    """The collection of renderable views.

    Parameters
    ----------
    logger:
        Structured logger for registration events.
    """

    def __init__(self, logger: StructuredLogger) -> None:
        self._entries: dict[ViewId, ViewEntry] = {}
        self._logger = logger

    def register(self, view_id: ViewId, title: str, factory: ViewFactory) -> None:
        if view_id in self._entries:
            self._logger.warning("View '%s' already registered; overwriting.", view_id)
        self._entries[view_id] = ViewEntry(view_id=view_id, title=title, factory=factory)
        self._logger.debug("View registered: %s (%s)", view_id, title)

    def get_view(self, view_id: Union[ViewId, str]) -> ViewEntry:
        """Return the entry for *view_id*.

        Raises
        ------
        KeyError
            If *view_id* is not registered.
        """
        try:
            return self._entries[ViewId(view_id)]
        except (KeyError, ValueError):
            raise KeyError(f"View '{view_id}' is not registered.") from None

    def resolve(
        self,
        view_id: Union[ViewId, str],
        fallback: ViewId = ViewId.DASHBOARD,
    ) -> Optional[ViewId]:
        """Return the view to build for *view_id*.

        An unregistered id falls back to *fallback*; ``None`` means
        neither is registered and there is nothing to show.
        """
        if view_id in self._entries:
            return ViewId(view_id)
        if fallback in self._entries:
            self._logger.error("No view registered for %s; showing %s.", view_id, fallback)
            return fallback
        self._logger.error("No view registered for %s or %s.", view_id, fallback)
        return None

    def __contains__(self, view_id: object) -> bool:
        return view_id in self._entries

    @property
    def view_ids(self) -> tuple[ViewId, ...]:
        return tuple(self._entries)

    def missing(self) -> tuple[ViewId, ...]:
        """Views the router can select that have no factory yet."""
        return tuple(view_id for view_id in ViewId if view_id not in self._entries)
