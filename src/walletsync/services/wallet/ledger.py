"""Ledger: events grouped by instrument code.

Built once from a finite event sequence and never mutated afterwards. Each
code maps to a tuple of its events in the order they were supplied, so views
handed out by lookup() and holdings() share the ledger's data without being
able to change it.
"""

from typing import Iterable, Iterator, Mapping

from walletsync.services.wallet.models import Code, Event
from walletsync.services.wallet.position import InstrumentView
from walletsync.system import LoggerFactory

logger = LoggerFactory.get_logger()


class Ledger:
    """
    Trade history partitioned by instrument.

    Example:
        >>> ledger = Ledger.from_events(events)
        >>> for view in ledger.holdings():
        ...     print(view.code, view.position().net_quantity, view.average_price())
        >>> ledger.lookup("NONEXISTENT") is None
        True
    """

    __slots__ = ("_events_by_code",)

    def __init__(self, events_by_code: Mapping[Code, tuple[Event, ...]]) -> None:
        """
        Initialize from an already grouped mapping.

        Prefer from_events(); this constructor trusts that every event under a
        key carries that key as its code.
        """
        self._events_by_code: dict[Code, tuple[Event, ...]] = dict(events_by_code)

    @classmethod
    def from_events(cls, events: Iterable[Event]) -> "Ledger":
        """
        Group events by code in a single pass.

        Per-code order follows the input. No deduplication and no validation
        of quantities or prices is performed.

        Args:
            events: Any finite iterable of events

        Returns:
            Immutable ledger
        """
        grouped: dict[Code, list[Event]] = {}
        total = 0
        for event in events:
            grouped.setdefault(event.code, []).append(event)
            total += 1

        ledger = cls({code: tuple(code_events) for code, code_events in grouped.items()})
        logger.debug("wallet.ledger_built", events=total, instruments=len(grouped))
        return ledger

    def lookup(self, code: Code) -> InstrumentView | None:
        """
        View over the events recorded for `code`.

        Exact, case-sensitive match. Returned whether or not the instrument is
        currently held.

        Returns:
            InstrumentView, or None if no event carries this code
        """
        events = self._events_by_code.get(code)
        if events is None:
            return None
        return InstrumentView(code, events)

    def holdings(self) -> Iterator[InstrumentView]:
        """
        Lazily yield views of instruments with a strictly positive net position.

        Order follows the underlying mapping (first appearance in the input).
        Call again for a fresh pass.
        """
        for view in self:
            if view.position() is not None:
                yield view

    def codes(self) -> list[Code]:
        """All instrument codes with at least one event."""
        return list(self._events_by_code)

    @property
    def event_count(self) -> int:
        return sum(len(events) for events in self._events_by_code.values())

    def __iter__(self) -> Iterator[InstrumentView]:
        """Views of every instrument, held or not."""
        for code, events in self._events_by_code.items():
            yield InstrumentView(code, events)

    def __len__(self) -> int:
        return len(self._events_by_code)

    def __contains__(self, code: object) -> bool:
        return code in self._events_by_code

    def __repr__(self) -> str:
        return f"Ledger(instruments={len(self)}, events={self.event_count})"
