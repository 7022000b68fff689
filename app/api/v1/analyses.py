from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from fastapi.responses import Response

from app.core.errors import ResumeGuardError
from app.core.rate_limit import rate_limit, upload_rate_limit
from app.schemas.analysis import AnalysisResultView, ResultView, SessionStatus, TextSubmission
from app.parsing.signatures import ACCEPTED_CONTENT_TYPES
from app.services.analysis_controller import AnalysisController

router = APIRouter()


def get_controller(request: Request) -> AnalysisController:
    return request.app.state.controller


def raise_http_error(exc: ResumeGuardError) -> None:
    raise HTTPException(
        status_code=exc.status_code,
        detail={"kind": exc.kind, "message": str(exc)},
    ) from exc


@router.post("/analyses/text", response_model=AnalysisResultView)
@rate_limit()
async def analyze_text(
    request: Request,
    payload: TextSubmission,
    controller: AnalysisController = Depends(get_controller),
):
    _ = request
    try:
        result = await controller.submit_text(payload.text, payload.file_name)
    except ResumeGuardError as exc:
        raise_http_error(exc)
    return AnalysisResultView.from_result(result)


@router.post("/analyses/file", response_model=AnalysisResultView)
@upload_rate_limit()
async def analyze_file(
    request: Request,
    file: UploadFile = File(...),
    controller: AnalysisController = Depends(get_controller),
):
    _ = request
    try:
        result = await controller.submit_file(file)
    except ResumeGuardError as exc:
        raise_http_error(exc)
    return AnalysisResultView.from_result(result)


@router.get("/analyses/current", response_model=AnalysisResultView)
async def current_analysis(controller: AnalysisController = Depends(get_controller)):
    if controller.current is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"kind": "no_current_analysis", "message": "There is no analysis to show."},
        )
    return AnalysisResultView.from_result(controller.current)


@router.post("/analyses/current/humanize", response_model=AnalysisResultView)
@rate_limit()
async def humanize_current(request: Request, controller: AnalysisController = Depends(get_controller)):
    _ = request
    try:
        result = await controller.humanize()
    except ResumeGuardError as exc:
        raise_http_error(exc)
    return AnalysisResultView.from_result(result)


@router.post("/analyses/current/reset", status_code=status.HTTP_204_NO_CONTENT)
async def reset_current(controller: AnalysisController = Depends(get_controller)):
    controller.reset()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/analyses/current/download")
async def download_current(
    view: ResultView = Query(default="original"),
    controller: AnalysisController = Depends(get_controller),
):
    try:
        file_name, text = controller.export(view)
    except ResumeGuardError as exc:
        raise_http_error(exc)
    return Response(
        content=text,
        media_type="text/plain; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{file_name}"'},
    )


@router.get("/session", response_model=SessionStatus)
async def session_status(request: Request, controller: AnalysisController = Depends(get_controller)):
    settings = request.app.state.settings
    current = controller.current
    return SessionStatus(
        state=controller.state,
        is_analyzing=controller.is_analyzing,
        is_humanizing=controller.is_humanizing,
        current_id=current.id if current else None,
        history_count=len(controller.history()),
        accepted_types=list(ACCEPTED_CONTENT_TYPES),
        upload_size_hint_mb=settings.upload_size_hint_mb,
        min_text_chars=controller.min_text_chars,
    )
