"""Similarity and plagiarism check APIs over uploaded attachments."""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from pydantic import BaseModel

from mindradix.api.deps import get_content_auditor, get_plagiarism_service, get_similarity_orchestrator
from mindradix.core.config import get_settings
from mindradix.core.errors import PayloadTooLargeError
from mindradix.models.similarity import Attachment
from mindradix.services.content_auditor import ContentAuditor, detect_ai_content
from mindradix.services.plagiarism_service import PlagiarismService
from mindradix.services.similarity_orchestrator import SimilarityOrchestrator

router = APIRouter(tags=["Similarity"])

CHUNK_SIZE = 1024 * 1024


class ApiResponse(BaseModel):
    status: str = "success"
    message: str
    data: Dict[str, Any]


class AuditRequest(BaseModel):
    text: str = ""


class AuditResponse(BaseModel):
    score: int
    details: List[str]
    web_score: float
    web_sources: List[str]


async def _read_upload(upload: UploadFile, limit: int) -> bytes:
    name = Path(upload.filename or "").name or "attachment"
    chunks: List[bytes] = []
    size = 0
    while True:
        chunk = await upload.read(CHUNK_SIZE)
        if not chunk:
            break
        size += len(chunk)
        if size > limit:
            raise PayloadTooLargeError(name, limit)
        chunks.append(chunk)
    return b"".join(chunks)


async def _read_attachments(files: Optional[List[UploadFile]]) -> List[Attachment]:
    limit = get_settings().max_upload_bytes
    attachments: List[Attachment] = []
    for index, upload in enumerate(files or [], start=1):
        data = await _read_upload(upload, limit)
        filename = Path(upload.filename or "").name or f"attachment-{index}"
        attachments.append(Attachment(id=f"att-{index}", filename=filename, data=data))
    return attachments


@router.post("/similarity", response_model=ApiResponse, summary="Run a TF-IDF similarity check")
async def run_similarity_check(
    files: Optional[List[UploadFile]] = File(None),
    content: str = Form(""),
    title: str = Form(""),
    include_web: bool = Form(False),
    threshold: Optional[str] = Query(None, description="Minimum pair score, defaults to 0.6"),
    top: Optional[str] = Query(None, description="Maximum number of pairs, clamped to [1, 200]"),
    orchestrator: SimilarityOrchestrator = Depends(get_similarity_orchestrator),
) -> ApiResponse:
    attachments = await _read_attachments(files)
    report = await orchestrator.run_similarity_check(
        content,
        attachments,
        threshold=threshold,
        top_n=top,
        include_web=include_web,
        query=title or None,
    )
    return ApiResponse(message=report.message, data=report.to_dict())


@router.post("/plagiarism", response_model=ApiResponse, summary="Run the plagiarism heuristics")
async def run_plagiarism_check(
    files: Optional[List[UploadFile]] = File(None),
    content: str = Form(""),
    report_csv: Optional[UploadFile] = File(None),
    use_web: bool = Form(False),
    service: PlagiarismService = Depends(get_plagiarism_service),
) -> ApiResponse:
    attachments = await _read_attachments(files)
    csv_text = None
    if report_csv is not None:
        raw = await _read_upload(report_csv, get_settings().max_upload_bytes)
        csv_text = raw.decode("utf-8", errors="replace")

    summary = await service.run_plagiarism_check(
        content,
        attachments,
        external_report_csv=csv_text,
        use_web_backend=use_web,
    )
    return ApiResponse(message="Plagiarism check completed", data=summary)


@router.post("/audit", response_model=AuditResponse, summary="Score text for AI-generation heuristics")
async def audit_text(
    payload: AuditRequest,
    auditor: ContentAuditor = Depends(get_content_auditor),
) -> AuditResponse:
    return AuditResponse(**detect_ai_content(payload.text, auditor))
