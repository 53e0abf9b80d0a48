"""
Pocketbook - Source Package

A local-first personal finance ledger: accounts, income/expense logging,
categories, group codes, even expense splitting and period reports.

DESIGN PRINCIPLES:
1. Every piece of state lives in a local key-value store
2. Reports are pure functions of (transactions, query, now)
3. Storage failures are logged, never fatal
4. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Pocketbook Team"
