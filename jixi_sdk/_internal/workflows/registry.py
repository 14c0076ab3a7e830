"""Name to endpoint mapping for Jixi workflows."""

import logging
from collections.abc import Iterable
from typing import TYPE_CHECKING

from jixi_sdk._internal.workflows.models import WorkflowEntry

if TYPE_CHECKING:
    from jixi_sdk._internal.config import JixiConfig

logger = logging.getLogger(__name__)


class WorkflowRegistry:
    """Holds the API key and the workflow lookup.

    The lookup is derived from ``entries`` and is never edited in place:
    ``rebuild`` builds a new mapping and swaps it in with a single
    assignment, so readers on other threads see either the old or the
    new mapping, never a partial one.
    """

    def __init__(self, api_key: str | None = None, entries: Iterable[WorkflowEntry] = ()) -> None:
        self._api_key = (api_key or "").strip()
        self._entries: tuple[WorkflowEntry, ...] = ()
        self._lookup: dict[str, str] = {}
        self.rebuild(entries)

    @classmethod
    def from_config(cls, config: "JixiConfig") -> "WorkflowRegistry":
        """Create a registry from a configuration snapshot."""
        return cls(api_key=config.api_key, entries=config.workflows)

    @property
    def api_key(self) -> str:
        return self._api_key

    @property
    def entries(self) -> tuple[WorkflowEntry, ...]:
        return self._entries

    def rebuild(self, entries: Iterable[WorkflowEntry]) -> None:
        """Replace the lookup with one built from ``entries``.

        The first entry wins for a repeated name; entries without a name
        are skipped.
        """
        entries = tuple(entries)
        lookup: dict[str, str] = {}
        for entry in entries:
            if entry.name and entry.name not in lookup:
                lookup[entry.name] = entry.url
        self._entries = entries
        self._lookup = lookup

    def resolve(self, name: str) -> str | None:
        """Return the URL for an exact, case-sensitive workflow name."""
        return self._lookup.get(name)

    def names(self) -> list[str]:
        return list(self._lookup)

    def __len__(self) -> int:
        return len(self._lookup)

    def log_summary(self) -> None:
        """Log what was loaded, without revealing the key itself."""
        logger.info(
            "[jixi] Loaded settings: apiKey? %s, workflows=%d",
            "YES" if self._api_key else "NO",
            len(self._entries),
        )
        for name, url in self._lookup.items():
            logger.debug("[jixi] Workflow: '%s' -> %s", name, url)
