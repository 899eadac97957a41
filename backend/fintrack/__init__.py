"""
FinTrack backend: recurring transactions and plan ledgers.
"""
