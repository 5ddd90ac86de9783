"""
Bank Ledger - Source Package

A single-user command-line ledger that records deposits and withdrawals
and keeps its history in a document on disk.

DESIGN PRINCIPLES:
1. The balance is always recomputed from history, never cached
2. Fail early, fail visibly
3. No silent corrections of user input
4. A mutation is durable before the operation returns
5. Storage format is swappable
"""

__version__ = "1.0.0"
__author__ = "Bank Ledger Team"
