"""
QuoteWatch

Polls intraday quotes and reports moving averages, Bollinger Bands,
trend and RSI for one symbol.
"""

__version__ = "0.1.0"
