"""
Debounced auto-save for the wizard draft.

Every dirty notification from the store replaces the pending timer, so a
burst of edits produces a single save carrying the final state. A save is
skipped when the snapshot matches what was last persisted.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from .draft_store import WizardDraftStore

logger = logging.getLogger(__name__)

SaveSink = Callable[[Dict[str, Any]], None]


def log_only_sink(snapshot: Dict[str, Any]) -> None:
    """Default sink until a persistence endpoint exists."""
    logger.info("Auto-saving draft for step %s", snapshot.get("current_step"))


class AutoSaveScheduler:
    def __init__(
        self,
        store: WizardDraftStore,
        save: Optional[SaveSink] = None,
        delay_seconds: float = 30.0,
        version: int = 1,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        self.store = store
        self.save = save or log_only_sink
        self.delay_seconds = delay_seconds
        self.version = version
        self.current_step = 0
        self._loop = loop
        self._timer: Optional[asyncio.TimerHandle] = None
        self._last_snapshot: Optional[str] = None
        self._unsubscribe = store.subscribe(self._on_change)

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def _on_change(self, section: str, store: WizardDraftStore) -> None:
        if store.is_dirty:
            self.schedule()

    def schedule(self) -> None:
        self.cancel()
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.debug("No running event loop; auto-save not scheduled, draft stays dirty")
                return
        self._timer = loop.call_later(self.delay_seconds, self.flush)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _serialize(self) -> str:
        # timestamp is left out so an unchanged draft compares equal
        return json.dumps(
            {"draft": self.store.draft, "current_step": self.current_step, "version": self.version},
            sort_keys=True,
            default=str,
        )

    def flush(self) -> bool:
        """Save now if the draft differs from the last saved snapshot."""
        self.cancel()
        serialized = self._serialize()
        if serialized == self._last_snapshot:
            logger.debug("Auto-save skipped: draft unchanged since last save")
            self.store.mark_saved()
            return False

        snapshot = {
            "draft": self.store.draft,
            "current_step": self.current_step,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "version": self.version,
        }
        self.save(snapshot)
        self._last_snapshot = serialized
        self.store.mark_saved()
        return True

    def close(self) -> None:
        self.cancel()
        self._unsubscribe()
