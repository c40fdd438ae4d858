"""
models/ - Domain Layer
======================
Dataclasses for ledger entries, recurring definitions, budgets and the
derived report values. Constructors validate their input.
"""
