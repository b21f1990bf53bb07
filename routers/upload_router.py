from typing import List, Optional
from fastapi import APIRouter, UploadFile, File, Form, HTTPException

from config import MAX_UPLOAD_BYTES
from models.session_models import UploadResponse
from services.session_service import (
    create_session,
    dataset_info,
    get_or_create_session,
    list_charts,
    list_tables,
    load_files,
)

router = APIRouter(prefix="/upload", tags=["upload"])


@router.post("/session")
async def new_session():
    session = create_session()
    return {"session_id": session.session_id}


@router.post("/files", response_model=UploadResponse)
async def upload_files(
    files: List[UploadFile] = File(...),
    session_id: Optional[str] = Form(None),
    dataset_id: Optional[str] = Form(None),
):
    try:
        session = get_or_create_session(session_id)
    except KeyError as e:
        raise HTTPException(status_code=404, detail=str(e))

    if dataset_id and len(files) != 1:
        raise HTTPException(status_code=400, detail="Replacing a dataset requires exactly one file.")

    # One byte past the limit is enough for load_file to reject the upload
    limit = MAX_UPLOAD_BYTES + 1
    uploads = [(f.filename or "", await f.read(limit)) for f in files]
    results = await load_files(session.session_id, uploads, dataset_id=dataset_id)

    return UploadResponse(
        session_id=session.session_id,
        datasets=[dataset_info(t) for t in list_tables(session.session_id)],
        charts=list_charts(session.session_id),
        errors=[r.error for r in results if r.error is not None],
    )
