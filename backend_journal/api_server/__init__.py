"""
API server package — HTTP/REST interface over the trade ledger and analytics.

Handles authentication and request validation, and delegates to the ledger,
account services and analytics engine for data.
"""
