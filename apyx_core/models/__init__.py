"""
Account snapshot models.

Immutable value objects shared by the pricing, matchmaking and
reconciliation components.
"""
