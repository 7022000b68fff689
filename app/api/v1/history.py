from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response

from app.api.v1.analyses import get_controller
from app.schemas.analysis import HistoryItemView, HistorySelection
from app.services.analysis_controller import AnalysisController

router = APIRouter()

LOSSY_HISTORY_NOTICE = (
    "Only a summary of this analysis was kept. "
    "Run the analysis again to see the full report."
)


@router.get("/history", response_model=list[HistoryItemView])
async def list_history(controller: AnalysisController = Depends(get_controller)):
    return [HistoryItemView.from_item(item) for item in controller.history()]


@router.get("/history/{item_id}", response_model=HistorySelection)
async def select_history_item(item_id: str, controller: AnalysisController = Depends(get_controller)):
    item = controller.select_history_item(item_id)
    if item is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"kind": "history_item_not_found", "message": "History item not found."},
        )
    return HistorySelection(
        item=HistoryItemView.from_item(item),
        report_available=False,
        notice=LOSSY_HISTORY_NOTICE,
    )


@router.delete("/history/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_history_item(item_id: str, controller: AnalysisController = Depends(get_controller)):
    controller.delete_history_item(item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
