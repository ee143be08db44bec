"""
Financify - Source Package

A personal-finance dashboard: net worth, monthly cashflow and
category breakdowns, with AI insights and a chat assistant
backed by Google Gemini.

DESIGN PRINCIPLES:
1. Numbers come from the data, never from the model
2. The summary is recomputed from raw transactions every time
3. AI failures never break the dashboard
4. Every AI call is audited
"""

__version__ = "1.0.0"
__author__ = "Financify Team"
