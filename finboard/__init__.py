"""
finboard - Source Package

Client-side aggregation and optimistic-synchronization layer for a
personal-finance dashboard.

DESIGN PRINCIPLES:
1. Derived views are recomputed, never stored
2. A background refresh never blanks what the user already sees
3. Failed mutations leave no trace in the visible cache
4. Every fetch and mutation is auditable
5. The ledger gateway is swappable
"""

__version__ = "1.0.0"
__author__ = "finboard Team"
