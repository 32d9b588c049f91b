"""
Pricing core - pure Python math. No AI, no database.

Given a validated AIQuoteResult or a list of Job records, produce
on-screen cost figures, dispatch readiness, and persistable quote records.
"""
