"""
Tradier Data
============

Typed client for the Tradier brokerage market-data API:
- Quotes, symbol lookup, option expirations and chains with greeks
- Historical prices, including seasonal lookback windows
- Corporate calendars (confirmed quarterly earnings)
"""

__version__ = "0.1.0"
