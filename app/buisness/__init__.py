"""
Domain layer for the procurement system.
Contains business rules, state machines and ledgers separated from data
persistence concerns.
"""
