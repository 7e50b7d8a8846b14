"""
HTTP API

Serves the memoized country boundaries to map clients.
"""

from typing import List

from fastapi import APIRouter, Depends, FastAPI, HTTPException
from loguru import logger

from . import __version__
from .collectors.boundary import (
    CountryBoundaryStore,
    BoundaryDatasetError,
    BoundaryDatasetNotFound,
    default_store,
)
from .models import Feature


def get_store() -> CountryBoundaryStore:
    return default_store()


router = APIRouter(prefix="/api/boundaries", tags=["boundaries"])


@router.get("/countries", response_model=List[Feature])
def get_countries(store: CountryBoundaryStore = Depends(get_store)) -> List[Feature]:
    try:
        return store.get()
    except BoundaryDatasetNotFound:
        raise HTTPException(status_code=404, detail="Country boundaries data not found")
    except BoundaryDatasetError as e:
        logger.error(f"Error serving country boundaries: {e}")
        raise HTTPException(status_code=500, detail="Failed to load boundaries")


def create_app() -> FastAPI:
    app = FastAPI(title="mapcanvas", version=__version__)
    app.include_router(router)
    return app


app = create_app()
