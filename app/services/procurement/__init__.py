"""
Procurement services
Catalog lookups, expression search and read-only document views.
"""
