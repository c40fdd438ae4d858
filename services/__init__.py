"""
services/ - Business Logic Layer
================================
Recurrence catch-up, aggregation, budget evaluation and the callers built
on them. Services receive repositories in their constructors.
"""
