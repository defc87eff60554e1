"""Documentation catalog endpoint."""

from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_documentation_root
from app.schemas.responses import CatalogEntry
from app.services.catalog import get_catalog
from app.services.errors import DocumentationNotFoundError
from app.utils.logging_config import get_logger

logger = get_logger("api.catalog")

router = APIRouter(prefix="/catalog", tags=["Documentation"])


@router.get("", response_model=List[CatalogEntry])
async def get_documentation_catalog(root: Path = Depends(get_documentation_root)):
    """List documentation domains and their topics."""
    try:
        return await get_catalog(root)
    except DocumentationNotFoundError as e:
        logger.warning("Documentation root missing", path=e.path)
        raise HTTPException(status_code=404, detail=str(e))
