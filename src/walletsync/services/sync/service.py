"""Sync runner: replicate held instruments' trades into a remote wallet."""

from typing import Callable

from walletsync.services.sync.interface import IWalletSync, SyncError
from walletsync.services.sync.models import SyncOutcome, SyncReport
from walletsync.services.wallet.ledger import Ledger
from walletsync.system import LoggerFactory

logger = LoggerFactory.get_logger()


def sync_holdings(
    ledger: Ledger,
    client: IWalletSync,
    on_outcome: Callable[[SyncOutcome], None] | None = None,
) -> SyncReport:
    """
    Post every event of every currently held instrument.

    Instruments are visited in `ledger.holdings()` order and each one's events
    in their recorded order. A failed event is recorded and the run continues.

    Args:
        ledger: Trade history
        client: Remote wallet
        on_outcome: Optional callback invoked after each event

    Returns:
        SyncReport with one outcome per posted event
    """
    report = SyncReport()

    for view in ledger.holdings():
        for event in view.events:
            try:
                client.add_asset(event)
            except SyncError as e:
                outcome = SyncOutcome(event=event, success=False, error=str(e))
                logger.error(
                    "sync.event_failed",
                    code=event.code,
                    side=event.side.value,
                    quantity=event.quantity,
                    error=str(e),
                )
            else:
                outcome = SyncOutcome(event=event, success=True)
                logger.debug("sync.event_added", code=event.code, side=event.side.value, quantity=event.quantity)

            report.outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)

    logger.info("sync.completed", added=len(report.added), failed=len(report.failed))
    return report
