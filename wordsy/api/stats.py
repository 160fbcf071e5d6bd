# wordsy/api/stats.py - Statistics and history
from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from wordsy.database import get_db
from wordsy.services import stats_service
from wordsy.utils import StandardResponse

router = APIRouter()


@router.get("/", response_model=StandardResponse)
async def get_statistics(db: Session = Depends(get_db)):
    """Word counts per status, quiz totals and daily history"""
    statistics = stats_service.get_statistics(db)

    return StandardResponse(
        status_code=200,
        is_success=True,
        details="Statistics retrieved successfully",
        data=statistics.to_dict()
    )


@router.get("/history", response_model=StandardResponse)
async def get_history(range_name: str = Query("day", alias="range"), db: Session = Depends(get_db)):
    """Daily records for a time range: hours, day or week"""
    result = stats_service.get_history(db, range_name)

    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={
            "range": range_name,
            "records": [record.to_dict() for record in result["records"]]
        }
    )
