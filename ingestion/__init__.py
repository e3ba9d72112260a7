"""
Data Ingestion Module

Handles fetching and normalizing data from external sources:
- yfinance for US ticker daily bars
- Eastmoney for mainland fund NAV history
- Portfolio position records
"""

__version__ = "0.1.0"
