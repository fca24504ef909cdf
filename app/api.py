"""
API module
==========

FastAPI backend: ``POST /ingest`` uploads a workbook for an education
level, ``GET /levels`` and ``GET /levels/{level}/items`` read the store.
"""

from typing import Any, Dict, List

from fastapi import Depends, FastAPI, File, Form, HTTPException, UploadFile
from fastapi.responses import JSONResponse

from app.backend.process import process_upload
from escopo.extractors.excel.reader import MalformedWorkbookError
from escopo.extractors.excel.vocabulary import VocabularyError
from escopo.logger import get_logger
from escopo.store import ScopeSequenceStore, StoreError

logger = get_logger(__name__)

app = FastAPI(title="Escopo-Sequência Ingestion Backend")


def get_store() -> ScopeSequenceStore:
    """Store dependency; overridden in tests."""
    return ScopeSequenceStore()


@app.post("/ingest")
async def ingest_endpoint(
    file: UploadFile = File(...),
    level: str = Form(...),
    store: ScopeSequenceStore = Depends(get_store),
):
    """
    Ingest the uploaded workbook and replace the stored items of *level*.

    Returns the ingestion summary (item count, skipped sheets, warnings, items).
    """
    level = (level or "").strip()
    if not level:
        raise HTTPException(status_code=400, detail="level must not be blank")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    try:
        summary = process_upload(content, level, store=store, filename=file.filename)
    except MalformedWorkbookError as e:
        logger.warning("Rejected upload %s: %s", file.filename, e)
        raise HTTPException(status_code=400, detail=f"Invalid workbook: {e}") from e
    except StoreError as e:
        logger.error("Store failure while saving level %r: %s", level, e, exc_info=True)
        raise HTTPException(status_code=500, detail="Could not save ingested items") from e
    except VocabularyError as e:
        logger.error("Header vocabulary could not be loaded: %s", e)
        raise HTTPException(status_code=500, detail="invalid header vocabulary") from e

    return JSONResponse(summary)


@app.get("/levels")
def list_levels(store: ScopeSequenceStore = Depends(get_store)) -> Dict[str, int]:
    """Item count per education level."""
    try:
        return store.counts()
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e


@app.get("/levels/{level}/items")
def list_level_items(level: str, store: ScopeSequenceStore = Depends(get_store)) -> List[Dict[str, Any]]:
    """Stored items of one level, camelCase JSON."""
    try:
        items = store.get_level(level)
    except StoreError as e:
        raise HTTPException(status_code=500, detail=str(e)) from e
    return [item.to_json_dict() for item in items]
