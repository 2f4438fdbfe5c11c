"""Duel status reconciliation"""

from .models import Reconciliation, ReconcileSource, ReconcileState
from .reconciler import DuelReconciler

__all__ = [
    "DuelReconciler",
    "Reconciliation",
    "ReconcileSource",
    "ReconcileState",
]
