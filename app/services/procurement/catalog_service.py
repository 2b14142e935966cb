"""
Catalog Service
Lookups of reference data (materials, suppliers, divisions, services) by id.
"""

from dataclasses import dataclass
from typing import Optional

from app import db
from app.buisness.procurement.errors import NotFound
from app.data.core.catalog import Division, Material, Service, Supplier


@dataclass(frozen=True)
class MaterialSnapshot:
    """Material display fields copied onto an order line at emission"""
    material_id: int
    code: str
    designation: str
    unit: str


class CatalogService:
    """
    Read-only reference lookups used by the procurement core.
    Unknown ids raise NotFound.
    """

    @staticmethod
    def _get(model, entity: str, entity_id):
        record = db.session.get(model, entity_id) if entity_id is not None else None
        if record is None:
            raise NotFound(entity, entity_id)
        return record

    @staticmethod
    def get_material(material_id: int) -> Material:
        return CatalogService._get(Material, "material", material_id)

    @staticmethod
    def get_supplier(supplier_id: int) -> Supplier:
        return CatalogService._get(Supplier, "supplier", supplier_id)

    @staticmethod
    def get_division(division_id: int) -> Division:
        return CatalogService._get(Division, "division", division_id)

    @staticmethod
    def get_service(service_id: int) -> Service:
        return CatalogService._get(Service, "service", service_id)

    @staticmethod
    def snapshot_material(material_id: int) -> MaterialSnapshot:
        material = CatalogService.get_material(material_id)
        return MaterialSnapshot(
            material_id=material.id,
            code=material.code,
            designation=material.designation,
            unit=material.unit,
        )

    @staticmethod
    def supplier_name(supplier_id: Optional[int]) -> Optional[str]:
        if supplier_id is None:
            return None
        return CatalogService.get_supplier(supplier_id).name
