"""Upload endpoints for meet entries files and results reports.

Each uploaded file is imported on its own and answered with an ImportSummary.
Row-level problems and storage failures are reported inside the summary; the
request itself only fails when a file cannot be read as text.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from swimcoach.api.dependencies import EntriesImporterDep, ResultsImporterDep
from swimcoach.exceptions import FileDecodeError
from swimcoach.services.import_schemas import ImportSummary

router = APIRouter(prefix="/imports", tags=["imports"])


@router.post("/entries", response_model=list[ImportSummary])
async def import_entries(
    importer: EntriesImporterDep,
    files: Annotated[list[UploadFile], File(alias="meet-entries-file")],
) -> list[ImportSummary]:
    """Import one or more meet entries files."""
    summaries = []
    for upload in files:
        content = await upload.read()
        try:
            lines = importer.decode(content, file_name=upload.filename)
        except FileDecodeError as e:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail=str(e),
            ) from e

        summary = await importer.import_stream(lines, file_name=upload.filename)
        summaries.append(summary)

    return summaries


@router.post("/results", response_model=list[ImportSummary])
async def import_results(
    importer: ResultsImporterDep,
    files: Annotated[list[UploadFile], File(alias="meet-results-file")],
    meet_date: Annotated[date | None, Form()] = None,
    dry_run: Annotated[bool, Form()] = False,
) -> list[ImportSummary]:
    """Import one or more results reports.

    With dry_run the documents are parsed and swimmers resolved, but nothing
    is written; accepted performances are listed in each summary.
    """
    summaries = []
    for upload in files:
        content = await upload.read()
        summary = await importer.import_document(
            content,
            file_name=upload.filename,
            meet_date=meet_date,
            dry_run=dry_run,
        )
        summaries.append(summary)

    return summaries
