"""
Duel status reconciliation ("self-healing") before an instruction is built.

The status cached on a curve can lag the duel account by one transaction.
An instruction that references a duel the program considers inactive, or
omits one it considers active, is rejected, so a non-active cached status
is always checked against the duel account itself. An ACTIVE cache is
trusted without a fetch.

Unavailable or unreadable duel accounts fail open: the reference is treated
as inactive and the caller falls back to the derived duel address.
"""

from concurrent.futures import ThreadPoolExecutor
from typing import Optional, Sequence

from ..accounts.store import AccountStore
from ..errors import AccountDecodeError, AccountFetchError, DuelAssetMismatchError
from ..logging.config import get_reconcile_logger, log_reconciliation, short_address
from ..models.accounts import CurveSnapshot, DuelSnapshot
from .models import Reconciliation, ReconcileSource, ReconcileState

logger = get_reconcile_logger(__name__)

DEFAULT_MAX_WORKERS = 8


def _status_name(status) -> Optional[str]:
    return status.name.lower() if status is not None else None


class DuelReconciler:
    """Resolves which duel account an instruction must reference."""

    def __init__(self, store: AccountStore):
        self.store = store

    def reconcile(self, curve: CurveSnapshot) -> Reconciliation:
        """
        Reconcile the curve's duel reference against the duel account.

        Performs at most one fetch. Fetch failures, timeouts, undecodable
        and missing duel accounts all resolve to TRUSTED_INACTIVE.

        Args:
            curve: Curve snapshot whose last_duel and cached status are checked

        Returns:
            Reconciliation carrying the trusted state and, when active, the
            duel address to reference
        """
        last_duel = curve.last_duel
        cached = _status_name(curve.cached_duel_status)

        if last_duel is None:
            return Reconciliation(state=ReconcileState.TRUSTED_INACTIVE, source=ReconcileSource.NO_DUEL)

        if curve.is_in_duel():
            result = Reconciliation(
                state=ReconcileState.TRUSTED_ACTIVE,
                source=ReconcileSource.CACHE,
                duel_address=last_duel,
            )
            self._log(result, last_duel, cached, None)
            return result

        try:
            duel = self.store.fetch_duel(last_duel)
        except (AccountFetchError, AccountDecodeError, TimeoutError) as e:
            result = Reconciliation(state=ReconcileState.TRUSTED_INACTIVE, source=ReconcileSource.FAIL_OPEN)
            self._log(result, last_duel, cached, None, {
                "error_type": type(e).__name__,
                "error": str(e),
            })
            return result

        if duel is None:
            result = Reconciliation(state=ReconcileState.TRUSTED_INACTIVE, source=ReconcileSource.FAIL_OPEN)
            self._log(result, last_duel, cached, None, {"reason": "duel account missing"})
            return result

        if duel.is_active():
            result = Reconciliation(
                state=ReconcileState.TRUSTED_ACTIVE,
                source=ReconcileSource.FETCHED,
                duel_address=last_duel,
                duel=duel,
            )
        else:
            result = Reconciliation(
                state=ReconcileState.TRUSTED_INACTIVE,
                source=ReconcileSource.FETCHED,
                duel=duel,
            )
        self._log(result, last_duel, cached, _status_name(duel.status))
        return result

    def select_duel_address(self, curve: CurveSnapshot, derived_address: bytes) -> bytes:
        """The duel account to reference: last_duel when trusted active, else derived_address."""
        result = self.reconcile(curve)
        return self.select_from(result, derived_address)

    @staticmethod
    def select_from(result: Reconciliation, derived_address: bytes) -> bytes:
        if result.is_active and result.duel_address is not None:
            return result.duel_address
        return derived_address

    def active_duel(self, curve: CurveSnapshot) -> Optional[DuelSnapshot]:
        """
        The authoritative active duel for the curve's token, if any.

        Unlike reconcile, a fetch failure while reading a duel the cache
        reports as ACTIVE propagates: the caller needs the duel's contents,
        not just its address.

        Raises:
            AccountFetchError: If the trusted active duel cannot be fetched
            AccountDecodeError: If the trusted active duel cannot be decoded
        """
        result = self.reconcile(curve)
        return self.active_duel_from(result)

    def active_duel_from(self, result: Reconciliation) -> Optional[DuelSnapshot]:
        if not result.is_active or result.duel_address is None:
            return None
        if result.duel is not None:
            return result.duel

        duel = self.store.fetch_duel(result.duel_address)
        if duel is None:
            logger.warning("Trusted active duel account missing", duel=short_address(result.duel_address))
        return duel

    def last_duel(self, curve: CurveSnapshot) -> Optional[DuelSnapshot]:
        """
        The duel last referenced by the curve, whatever its status.

        No reconciliation is applied; resolved and pending duels are
        returned as stored.

        Raises:
            AccountFetchError: If the duel account cannot be fetched
            AccountDecodeError: If the duel account cannot be decoded
        """
        if curve.last_duel is None:
            return None
        return self.store.fetch_duel(curve.last_duel)

    @staticmethod
    def require_counterparty(duel: DuelSnapshot, asset_id: bytes) -> bytes:
        """
        The asset the traded token is paired against in duel.

        Raises:
            DuelAssetMismatchError: If the duel has no second asset or does
                not include asset_id
        """
        if duel.asset_b is None:
            raise DuelAssetMismatchError(
                "Active duel has no second asset",
                duel_address=duel.address,
                asset_id=asset_id,
            )

        counterparty = duel.counterparty_of(asset_id)
        if counterparty is None:
            raise DuelAssetMismatchError(
                "Traded asset is not a participant of the active duel",
                duel_address=duel.address,
                asset_id=asset_id,
                context={
                    "asset_a": short_address(duel.asset_a),
                    "asset_b": short_address(duel.asset_b),
                },
            )
        return counterparty

    def reconcile_many(
        self,
        curves: Sequence[CurveSnapshot],
        max_workers: int = DEFAULT_MAX_WORKERS
    ) -> list[Reconciliation]:
        """Reconcile independent curves concurrently; results follow input order."""
        if not curves:
            return []

        workers = max(1, min(max_workers, len(curves)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="reconcile") as pool:
            return list(pool.map(self.reconcile, curves))

    def _log(
        self,
        result: Reconciliation,
        duel: bytes,
        cached: Optional[str],
        fetched: Optional[str],
        context: Optional[dict] = None
    ) -> None:
        log_reconciliation(
            logger,
            duel=duel,
            cached_status=cached,
            fetched_status=fetched,
            state=result.state.value,
            source=result.source.value,
            context=context,
        )
