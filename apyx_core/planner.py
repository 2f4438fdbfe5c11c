"""
Trade planning: everything an instruction builder needs for a buy or sell.

The planner strings the prediction steps together. It prices the trade,
predicts the post-trade market cap, derives the match slot and duel
address from it, and reconciles the curve's duel reference. Address
derivation is injected because seed hashing belongs to the transaction
layer.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from .accounts.store import AccountStore
from .config.defaults import ClientParams
from .curve.pricing import (
    BuyDeltas,
    ensure_open,
    fee_adjusted_buy,
    post_trade_market_cap,
    price_based_market_cap,
    quote_for_base,
    sell_quote_delta,
)
from .curve.quotes import with_slippage_sell
from .errors import AccountFetchError
from .logging.config import get_logger, short_address
from .matchmaking.matchmaker import MatchSlot, derive_match_slot
from .models.accounts import CurveSnapshot, ProgramConfig
from .reconcile.models import Reconciliation
from .reconcile.reconciler import DuelReconciler

logger = get_logger(__name__)

DuelAddressDeriver = Callable[[int, int, int], bytes]
CurveAddressDeriver = Callable[[bytes], bytes]


@dataclass(frozen=True)
class BuyPlan:
    """Predicted outcome and account references for a buy."""
    asset_id: bytes
    spendable: int
    deltas: BuyDeltas
    post_trade_market_cap: int
    match_slot: MatchSlot
    derived_duel_address: bytes
    reconciliation: Reconciliation
    duel_address: bytes                          # account the instruction references
    last_duel: Optional[bytes]
    min_tokens_out: int
    launch: bool = False

    @property
    def tokens_out(self) -> int:
        return self.deltas.tokens_out


@dataclass(frozen=True)
class SellPlan:
    """Predicted outcome and account references for a sell."""
    asset_id: bytes
    base_in: int
    quote_out: int
    post_trade_market_cap: int
    match_slot: MatchSlot
    derived_duel_address: bytes
    reconciliation: Reconciliation
    duel_address: bytes
    last_duel: Optional[bytes]
    min_quote_out: int

    # Populated only when selling during an active duel
    counterparty: Optional[bytes] = None
    counterparty_market_cap: Optional[int] = None
    is_winner: Optional[bool] = None

    @property
    def loser(self) -> Optional[bytes]:
        """Asset predicted to be losing after the sell; its curve funds the mercy vault."""
        if self.is_winner is None:
            return None
        return self.counterparty if self.is_winner else self.asset_id


class TradePlanner:
    """Plans buys and sells against a program config and an account store."""

    def __init__(
        self,
        store: AccountStore,
        config: ProgramConfig,
        derive_duel_address: DuelAddressDeriver,
        reconciler: Optional[DuelReconciler] = None,
        derive_curve_address: Optional[CurveAddressDeriver] = None,
        default_slippage_bps: int = ClientParams.default_slippage_bps
    ):
        self.store = store
        self.config = config
        self.derive_duel_address = derive_duel_address
        self.reconciler = reconciler or DuelReconciler(store)
        # Stores keyed by asset id need no derivation
        self.derive_curve_address = derive_curve_address or (lambda asset_id: asset_id)
        self.default_slippage_bps = default_slippage_bps

    def plan_buy(
        self,
        asset_id: bytes,
        spendable: int,
        slot: int,
        curve: Optional[CurveSnapshot] = None,
        slippage_bps: Optional[int] = None
    ) -> BuyPlan:
        """
        Plan a buy of spendable quote units, fees included.

        Without a curve the buy is priced as part of a launch: the initial
        reserves from the config with no real quote yet.

        Args:
            asset_id: Token being bought
            spendable: Quote the user is willing to spend, fees included
            slot: Current slot, used for the match window
            curve: Current curve snapshot, None for launch-and-buy
            slippage_bps: Tolerance for min_tokens_out, defaults to the client setting

        Returns:
            BuyPlan with the fee split, token output and duel references

        Raises:
            CurveCompleteError: If the curve has graduated
        """
        launch = curve is None
        if curve is None:
            curve = self._launch_curve()
        ensure_open(curve)

        deltas = fee_adjusted_buy(
            spendable,
            curve.virtual_quote_reserve,
            curve.virtual_base_reserve,
            self.config.protocol_fee_bps,
            self.config.creator_fee_bps,
        )
        post_mcap = post_trade_market_cap(curve, True, deltas.adjusted_net_quote, deltas.tokens_out)

        match_slot, derived, reconciliation, duel_address = self._resolve_duel(asset_id, post_mcap, slot, curve)

        plan = BuyPlan(
            asset_id=asset_id,
            spendable=spendable,
            deltas=deltas,
            post_trade_market_cap=post_mcap,
            match_slot=match_slot,
            derived_duel_address=derived,
            reconciliation=reconciliation,
            duel_address=duel_address,
            last_duel=self._last_duel_passthrough(curve),
            min_tokens_out=with_slippage_sell(deltas.tokens_out, self._slippage(slippage_bps)),
            launch=launch,
        )

        logger.info(
            "Planned buy",
            asset=short_address(asset_id),
            spendable=spendable,
            tokens_out=deltas.tokens_out,
            post_trade_market_cap=post_mcap,
            bucket=match_slot.bucket,
            window=match_slot.window,
            match_key=match_slot.key,
            duel=short_address(duel_address),
            launch=launch,
        )
        return plan

    def plan_sell(
        self,
        asset_id: bytes,
        base_in: int,
        slot: int,
        curve: CurveSnapshot,
        slippage_bps: Optional[int] = None
    ) -> SellPlan:
        """
        Plan a sell of base_in tokens.

        During an active duel the counterparty curve is read and the
        post-sell market cap compared with its current market cap; ties go
        to the seller.

        Raises:
            CurveCompleteError: If the curve has graduated
            DuelAssetMismatchError: If the active duel does not pair asset_id
            AccountFetchError: If the active duel or counterparty curve cannot be read
        """
        ensure_open(curve)

        quote_out = quote_for_base(curve, base_in)
        # Reserves move by the uncapped delta
        post_mcap = post_trade_market_cap(
            curve, False, sell_quote_delta(curve.virtual_quote_reserve, curve.virtual_base_reserve, base_in), base_in
        )

        match_slot, derived, reconciliation, duel_address = self._resolve_duel(asset_id, post_mcap, slot, curve)

        counterparty = None
        counterparty_mcap = None
        is_winner = None
        if reconciliation.is_active:
            duel = self.reconciler.active_duel_from(reconciliation)
            if duel is None:
                raise AccountFetchError("Active duel account not found", address=reconciliation.duel_address)

            counterparty = self.reconciler.require_counterparty(duel, asset_id)
            counterparty_curve = self.store.fetch_curve(self.derive_curve_address(counterparty))
            if counterparty_curve is None:
                raise AccountFetchError("Counterparty curve not found", address=counterparty)

            counterparty_mcap = price_based_market_cap(counterparty_curve)
            is_winner = post_mcap >= counterparty_mcap

        plan = SellPlan(
            asset_id=asset_id,
            base_in=base_in,
            quote_out=quote_out,
            post_trade_market_cap=post_mcap,
            match_slot=match_slot,
            derived_duel_address=derived,
            reconciliation=reconciliation,
            duel_address=duel_address,
            last_duel=self._last_duel_passthrough(curve),
            min_quote_out=with_slippage_sell(quote_out, self._slippage(slippage_bps)),
            counterparty=counterparty,
            counterparty_market_cap=counterparty_mcap,
            is_winner=is_winner,
        )

        logger.info(
            "Planned sell",
            asset=short_address(asset_id),
            base_in=base_in,
            quote_out=quote_out,
            post_trade_market_cap=post_mcap,
            bucket=match_slot.bucket,
            window=match_slot.window,
            match_key=match_slot.key,
            duel=short_address(duel_address),
            counterparty=short_address(counterparty),
            is_winner=is_winner,
        )
        return plan

    def _resolve_duel(
        self,
        asset_id: bytes,
        post_mcap: int,
        slot: int,
        curve: CurveSnapshot
    ) -> tuple[MatchSlot, bytes, Reconciliation, bytes]:
        match_slot = derive_match_slot(asset_id, post_mcap, slot, self.config)
        derived = self.derive_duel_address(match_slot.bucket, match_slot.window, match_slot.key)
        reconciliation = self.reconciler.reconcile(curve)
        return match_slot, derived, reconciliation, DuelReconciler.select_from(reconciliation, derived)

    def _launch_curve(self) -> CurveSnapshot:
        return CurveSnapshot(
            virtual_quote_reserve=self.config.initial_virtual_quote_reserve,
            virtual_base_reserve=self.config.initial_virtual_base_reserve,
            real_quote_reserve=0,
            real_base_reserve=self.config.initial_real_base_reserve,
            total_supply=self.config.total_supply,
        )

    @staticmethod
    def _last_duel_passthrough(curve: CurveSnapshot) -> Optional[bytes]:
        if curve.last_duel is not None and curve.cached_duel_status is not None:
            return curve.last_duel
        return None

    def _slippage(self, slippage_bps: Optional[int]) -> int:
        return self.default_slippage_bps if slippage_bps is None else slippage_bps
