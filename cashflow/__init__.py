"""
Cash Flow Tracker - Source Package

A personal finance tracker for one person: incomes, spendings,
debt obligations, holdings and budgets, with derived summaries.

DESIGN PRINCIPLES:
1. The local state is authoritative; the remote store is a mirror
2. Every mutation is an action applied by a pure reducer
3. Derived numbers are recomputed on read, never stored
4. Network I/O lives in the orchestrator, never in the reducer
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Cash Flow Tracker Team"
