"""
Services Layer
Read-side helpers used by the routes and by the business layer:
catalog lookups, expression search and dashboard counters, and the
read-only document views.

Services never change procurement state; lifecycle and ledger operations
live in app.buisness.procurement.
"""
