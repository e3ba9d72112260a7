"""
Analysis Engine Module

Turns close series and positions into portfolio signals:
- Indicators (SMA, EMA, MACD, RSI, Bollinger bands, returns, trend)
- Sector radar scoring and ranking
- Concentration and drawdown risk grading
"""

__version__ = "0.1.0"
