"""
Structured logging for the trade journal backend.

JSON logs with timestamp, event_type and trader/trade context.
Use get_logger() in every module for aggregation-friendly output.
"""

from backend_journal.journal_logging.logger import bind_trader, get_logger

__all__ = ["bind_trader", "get_logger"]
