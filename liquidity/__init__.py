"""
Liquidity Planner

Rolling 13-week cash position forecast for SMB ledgers.
"""

__version__ = "0.1.0"
