"""FastAPI REST API for PDF document import."""

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from . import __version__
from .config import ImportOptions
from .layout import ImportResult, PDFImporter, PDFImportError, PDFImportErrorCode
from .logger import logger

# Maximum file size for uploads (50MB)
MAX_UPLOAD_SIZE = 50 * 1024 * 1024

_ERROR_STATUS = {
    PDFImportErrorCode.INVALID_PDF: 400,
    PDFImportErrorCode.PASSWORD_REQUIRED: 401,
    PDFImportErrorCode.INCORRECT_PASSWORD: 401,
}


class HealthResponse(BaseModel):
    status: str
    version: str


class ErrorResponse(BaseModel):
    code: str
    message: str


app = FastAPI(
    title="PDF Document Import API",
    description="Reconstructs paragraphs, tables and images from PDF files",
    version=__version__,
)

_importer: PDFImporter | None = None


def get_importer() -> PDFImporter:
    """Lazy initialization of the importer."""
    global _importer
    if _importer is None:
        _importer = PDFImporter()
    return _importer


# --- Exception Handlers ---


@app.exception_handler(PDFImportError)
async def pdf_import_error_handler(request, exc: PDFImportError):
    return JSONResponse(
        status_code=_ERROR_STATUS.get(exc.code, 422),
        content=ErrorResponse(code=exc.code.value, message=exc.message).model_dump(),
    )


# --- Endpoints ---


@app.get("/health", response_model=HealthResponse)
def health():
    """Liveness check."""
    return HealthResponse(status="healthy", version=__version__)


@app.post("/api/v1/import", response_model=ImportResult)
def import_pdf(
    file: UploadFile = File(...),
    detect_tables: bool | None = Query(default=None),
    extract_images: bool | None = Query(default=None),
    table_confidence_threshold: float | None = Query(default=None, ge=0.0, le=1.0),
    password: str | None = Query(default=None),
):
    """Import an uploaded PDF into document data."""
    file_name = file.filename or "unknown.pdf"
    if not file_name.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Only PDF files are supported")

    data = file.file.read(MAX_UPLOAD_SIZE + 1)
    if len(data) > MAX_UPLOAD_SIZE:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {MAX_UPLOAD_SIZE // (1024 * 1024)}MB",
        )
    if not data.startswith(b"%PDF-"):
        raise HTTPException(status_code=400, detail="File is not a valid PDF")

    options = ImportOptions.from_env(
        detect_tables=detect_tables,
        extract_images=extract_images,
        table_confidence_threshold=table_confidence_threshold,
        password=password,
    )
    logger.info("import requested", file_name=file_name, size=len(data))
    return get_importer().import_bytes(data, options)
