"""
Data Ingestion Module

Turns provider data into typed records for the analysis engine:
- CSV files of NAV and distribution history
- Mutual fund distribution components and money market daily rates
"""

__version__ = "0.1.0"
