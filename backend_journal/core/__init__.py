"""
Core utilities — domain exceptions and other cross-cutting concerns shared by
the ledger, analytics engine and API server.
"""
