"""
Procurement domain layer
Need expression lifecycle, purchase order ledger, reception ledger and the
fulfillment statistics derived from them.
"""
