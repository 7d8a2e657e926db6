"""Services exports."""
from commons_youth.services.boundaries import BoundaryCache, BoundaryDataSource, build_boundary_source
from commons_youth.services.group_directory import GroupDirectory, SqlGroupDirectory, filter_groups
from commons_youth.services.storage import get_storage
from commons_youth.services.storage_base import StorageBackend
from commons_youth.services.thai_locations import ThaiLocationCache, get_coordinates

__all__ = [
    "BoundaryCache",
    "BoundaryDataSource",
    "build_boundary_source",
    "GroupDirectory",
    "SqlGroupDirectory",
    "filter_groups",
    "get_storage",
    "StorageBackend",
    "ThaiLocationCache",
    "get_coordinates",
]
