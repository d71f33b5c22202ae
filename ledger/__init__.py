"""
Personal Ledger - Source Package

A ledger engine for personal finances: accounts, money movements and
budget categories kept consistent in three flat CSV files.

DESIGN PRINCIPLES:
1. Every mutation is a pure transformation: (Ledger, input) -> result
2. Expected failures are returned, never raised
3. Money is integer minor units, never floats
4. A crash never leaves a half-written file
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
