"""
CurrEx - Bank Exchange Rates Core

Fetches current and historical exchange rates of Ukrainian banks, caches
them, selects the best buy/sell quotes and hands the latest rates over to
the home-screen widget process.
"""

__version__ = "1.0.0"
