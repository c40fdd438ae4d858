"""
db/ - Storage Layer
===================
PostgreSQL connection pool, the transaction helper used by the recurrence
engine, and schema creation for the expense ledger.
Driver errors raised here are translated into StoreError before they reach
the services.
"""
