"""API v1 router aggregation."""
from fastapi import APIRouter

from commons_youth.api.v1.auth import router as auth_router
from commons_youth.api.v1.groups import router as groups_router
from commons_youth.api.v1.activities import router as activities_router
from commons_youth.api.v1.projects import router as projects_router
from commons_youth.api.v1.map import router as map_router
from commons_youth.api.v1.locations import router as locations_router
from commons_youth.api.v1.catalog import router as catalog_router

router = APIRouter()

router.include_router(auth_router)
router.include_router(groups_router)
router.include_router(activities_router)
router.include_router(projects_router)
router.include_router(map_router)
router.include_router(locations_router)
router.include_router(catalog_router)
