"""
repositories/ - Data Access Layer
==================================
One repository per ledger entity (expenses, recurring definitions, budgets,
categories, users). Every query is scoped to the owning username, and
methods that join a larger unit of work accept an optional connection.
"""
