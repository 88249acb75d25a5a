from __future__ import annotations

import queue
import threading
from dataclasses import replace
from decimal import Decimal
from typing import Dict, List, Optional, Tuple

from servicequote.core.contracts import ChangeSink
from servicequote.logging_config import get_logger
from servicequote.metrics import record_change

from .records import PRICE_FIELDS, ChangeRecord

D = Decimal

logger = get_logger("changes")


class ChangeRecorder:
    """
    Emits a ChangeRecord whenever a price-relevant field moves away from its
    immediately prior in-session value.

    Fire-and-forget: a failing sink is logged and never breaks the session.
    """

    def __init__(self, service_id: str, sink: Optional[ChangeSink] = None):
        self.service_id = service_id
        self._sink = sink

    @property
    def enabled(self) -> bool:
        return self._sink is not None

    def observe(
        self,
        field_name: str,
        previous: D,
        current: D,
        *,
        area_key: Optional[str] = None,
        quantity: Optional[D] = None,
        frequency: Optional[str] = None,
    ) -> Optional[ChangeRecord]:
        if field_name not in PRICE_FIELDS or previous == current:
            return None

        change = ChangeRecord(
            service_id=self.service_id,
            field_name=field_name,
            field_display_name=PRICE_FIELDS[field_name],
            original_value=previous,
            new_value=current,
            area_key=area_key,
            quantity=quantity,
            frequency=frequency,
        )
        record_change(self.service_id, field_name)

        if self._sink is None:
            return change
        try:
            self._sink.record(change)
        except Exception as e:
            logger.error(f"Change sink failed for {self.service_id}.{field_name}: {e!r}")
        return change


class ChangeCollector:
    """
    Batching sink. One pending entry per (service, area, field), keeping the
    first original value; an entry that returns to its original value is
    dropped. `flush()` drains the batch in first-seen order.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._pending: Dict[Tuple[str, Optional[str], str], ChangeRecord] = {}

    def record(self, change: ChangeRecord) -> None:
        key = (change.service_id, change.area_key, change.field_name)
        with self._lock:
            existing = self._pending.get(key)
            if existing is not None:
                change = replace(change, original_value=existing.original_value)
            if change.new_value == change.original_value:
                self._pending.pop(key, None)
                return
            self._pending[key] = change

    def pending(self) -> List[ChangeRecord]:
        with self._lock:
            return list(self._pending.values())

    def flush(self) -> List[ChangeRecord]:
        with self._lock:
            out = list(self._pending.values())
            self._pending.clear()
        return out

    def __len__(self) -> int:
        return len(self._pending)


class QueueChangeSink:
    """Forwards records to a queue drained by a persistence worker."""

    def __init__(self, q: "queue.Queue[ChangeRecord]"):
        self._queue = q

    def record(self, change: ChangeRecord) -> None:
        self._queue.put_nowait(change)
