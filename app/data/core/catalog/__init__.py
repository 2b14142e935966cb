"""
Catalog reference data
Materials, suppliers and organizational units referenced by procurement records
"""

from app.data.core.catalog.organization import Division, Service
from app.data.core.catalog.material import Material
from app.data.core.catalog.supplier import Supplier

__all__ = [
    'Division',
    'Service',
    'Material',
    'Supplier',
]
