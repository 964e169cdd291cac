"""
Analysis Engine Module

Reconciles fund NAV and distribution data and compares portfolios:
- Reconciliation onto a common date axis
- Distribution reinvestment simulation
- Portfolio aggregation with forward fill
- Returns, extrema, drawdown and volatility
- Indexed comparison of two portfolios
"""

__version__ = "0.1.0"
