"""
Apyx Core - Off-chain prediction core for bonding curve duels

Predicts, to the integer, what the remote bonding curve program computes:
curve pricing and fees, market cap bucket / window / match key derivation,
and which duel account a buy or sell instruction must reference.
"""

__version__ = "0.1.0"
__author__ = "Apyx Team"
