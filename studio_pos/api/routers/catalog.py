from fastapi import APIRouter, Depends

from studio_pos.api.deps import get_catalog
from studio_pos.domain.catalog import Catalog
from studio_pos.domain.schemas import CatalogOut

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("", response_model=CatalogOut)
def get_catalog_view(catalog: Catalog = Depends(get_catalog)):
    return catalog
