"""
tablefix - FastAPI Backend

This is the main application entry point. It defines the HTTP API routes the
frontend (or any client) uses to clean or analyze CSV data.

TWO WORKFLOWS:
──────────────
• Clean (/clean, /clean/upload):
  Positional cleaning. Blank cells become "0", malformed emails and numbers
  in role-tagged columns are replaced with random plausible values, and
  exact duplicate rows are removed. Returns the new table and a change log.

• Analyze (/analyze, /analyze/upload):
  Profiling. Infers a type per column and reports missing, mistyped and
  duplicate values row by row. Nothing is repaired; cells are only trimmed.

Both workflows accept either a JSON body (table or pasted CSV text) or an
uploaded .csv file. /export turns a table back into a downloadable CSV.

Every call is stateless: nothing is stored between requests.
"""

import logging

from dotenv import load_dotenv

# Load environment variables BEFORE reading settings
load_dotenv()

from fastapi import FastAPI, UploadFile, File, HTTPException
from fastapi.responses import Response
from fastapi.middleware.cors import CORSMiddleware

from tablefix import __version__
from tablefix.config import get_settings
from tablefix.models.schemas import (
    AnalyzeRequest,
    CleanRequest,
    CleanResult,
    ExportRequest,
    ProfileConfig,
    ProfileReport,
)
from tablefix.services.csv_io import TableShapeError, parse_csv, table_to_csv
from tablefix.services.positional_cleaner import clean_table
from tablefix.services.profiler import profile_csv

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="tablefix API",
    description="API for cleaning and profiling CSV data",
    version=__version__,
)

# CORS middleware for frontend integration
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


# ============================================
# Helper Functions
# ============================================

async def read_upload_text(file: UploadFile) -> str:
    """
    Read an uploaded CSV file as text.

    Raises HTTPException 400 if the file is not a .csv, is larger than the
    configured limit, or is not valid UTF-8.
    """
    if not file.filename or not file.filename.lower().endswith(".csv"):
        raise HTTPException(status_code=400, detail="Only CSV files are accepted")

    contents = await file.read()
    if len(contents) > settings.max_upload_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File is too large ({len(contents)} bytes, limit {settings.max_upload_bytes})",
        )

    try:
        # utf-8-sig drops the BOM that spreadsheet exports often add
        return contents.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise HTTPException(status_code=400, detail="CSV file must be UTF-8 encoded")


def run_clean(request: CleanRequest) -> CleanResult:
    try:
        return clean_table(request.csv_data, request.column_schema)
    except TableShapeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Positional cleaning failed")
        raise HTTPException(status_code=500, detail=f"Error cleaning data: {str(e)}")


def run_profile(text: str, sample_size: int) -> ProfileReport:
    try:
        return profile_csv(text, ProfileConfig(sample_size=sample_size))
    except TableShapeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Profiling failed")
        raise HTTPException(status_code=500, detail=f"Error analyzing data: {str(e)}")


# ============================================
# API Routes
# ============================================

@app.get("/")
async def root():
    """Health check endpoint. Returns 200 if the server is running."""
    return {"status": "ok", "message": "tablefix API is running"}


@app.post("/clean", response_model=CleanResult)
async def clean(request: CleanRequest):
    """
    Clean an already-parsed table.

    The body carries `csvData` (header row first) and an optional `schema`
    describing which columns are numeric or email. Without a schema,
    columns 2 and 4 are numeric and column 3 is an email.

    Returns the cleaned table and a change log such as:
        ["Replaced 1 missing value(s) with 0",
         "Replaced 2 invalid value(s) with random valid values"]

    Raises:
        400: A row has more cells than the header
    """
    return run_clean(request)


@app.post("/clean/upload", response_model=CleanResult)
async def clean_upload(file: UploadFile = File(...)):
    """Clean an uploaded CSV file using the default column layout."""
    text = await read_upload_text(file)
    try:
        table = parse_csv(text)
    except TableShapeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return run_clean(CleanRequest(csv_data=table))


@app.post("/analyze", response_model=ProfileReport)
async def analyze(request: AnalyzeRequest):
    """
    Profile pasted CSV text.

    This is a READ-ONLY analysis: the returned `cleanedCSV` differs from the
    input only by trimmed whitespace. Issues are reported per CSV line,
    together with the inferred column types and totals per category.
    """
    return run_profile(request.csv, request.sample_size or settings.sample_size)


@app.post("/analyze/upload", response_model=ProfileReport)
async def analyze_upload(file: UploadFile = File(...)):
    """Profile an uploaded CSV file."""
    text = await read_upload_text(file)
    return run_profile(text, settings.sample_size)


@app.post("/export")
async def export_csv(request: ExportRequest):
    """
    Serialize a table to CSV and return it as a file download.

    Raises:
        400: A row has more cells than the header
    """
    try:
        csv_text = table_to_csv(request.csv_data)
    except TableShapeError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return Response(
        content=csv_text,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{request.filename}"'},
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
