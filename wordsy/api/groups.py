# wordsy/api/groups.py - Groups and membership
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from pydantic import BaseModel
from typing import Optional

from wordsy.database import get_db
from wordsy.models import GROUP_COLORS
from wordsy.services import group_service
from wordsy.utils import StandardResponse, group_to_dict

router = APIRouter()


# ================================
# REQUEST MODELS
# ================================

class GroupCreate(BaseModel):
    name: str
    description: Optional[str] = None
    color: str = "blue"
    language: Optional[str] = None


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    color: Optional[str] = None
    language: Optional[str] = None


def _status_for(message: str) -> int:
    return 404 if "not found" in message.lower() else 400


# ================================
# GROUP ENDPOINTS
# ================================

@router.get("/", response_model=StandardResponse)
async def list_groups(db: Session = Depends(get_db)):
    groups = group_service.get_groups(db)

    return StandardResponse(
        status_code=200,
        is_success=True,
        details="Groups retrieved successfully",
        data={"groups": [group_to_dict(group) for group in groups]}
    )


@router.post("/", response_model=StandardResponse, status_code=201)
async def create_group(group_data: GroupCreate, db: Session = Depends(get_db)):
    """Create new group"""
    if not group_data.name or len(group_data.name.strip()) < 1:
        raise HTTPException(status_code=400, detail="Group name is required")

    if len(group_data.name) > 100:
        raise HTTPException(status_code=400, detail="Group name is too long (max 100 characters)")

    if group_data.color not in GROUP_COLORS:
        raise HTTPException(status_code=400, detail=f"Invalid color. Must be one of: {GROUP_COLORS}")

    result = group_service.create_group(
        db=db,
        name=group_data.name,
        description=group_data.description,
        color=group_data.color,
        language=group_data.language
    )

    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["message"])

    return StandardResponse(
        status_code=201,
        is_success=True,
        details=result["message"],
        data=group_to_dict(result["group"])
    )


@router.get("/{group_id}", response_model=StandardResponse)
async def get_group(group_id: int, db: Session = Depends(get_db)):
    """Get group with its words"""
    group = group_service.get_group_by_id(db, group_id)

    if not group:
        raise HTTPException(status_code=404, detail="Group not found")

    return StandardResponse(
        status_code=200,
        is_success=True,
        details="Group retrieved successfully",
        data=group_to_dict(group, include_words=True)
    )


@router.put("/{group_id}", response_model=StandardResponse)
async def update_group(group_id: int, group_data: GroupUpdate, db: Session = Depends(get_db)):
    if group_data.name is not None and len(group_data.name) > 100:
        raise HTTPException(status_code=400, detail="Group name is too long (max 100 characters)")

    result = group_service.update_group(
        db=db,
        group_id=group_id,
        name=group_data.name,
        description=group_data.description,
        color=group_data.color,
        language=group_data.language
    )

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data=group_to_dict(result["group"])
    )


@router.delete("/{group_id}", response_model=StandardResponse)
async def delete_group(group_id: int, db: Session = Depends(get_db)):
    """Delete group; words left without any group are deleted too"""
    result = group_service.delete_group(db, group_id)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={
            "deleted_group_id": group_id,
            "deleted_words": result["deleted_words"]
        }
    )


# ================================
# MEMBERSHIP ENDPOINTS
# ================================

@router.post("/{group_id}/words/{word_id}", response_model=StandardResponse)
async def add_word(group_id: int, word_id: int, db: Session = Depends(get_db)):
    result = group_service.add_word_to_group(db, group_id, word_id)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data=group_to_dict(result["group"], include_words=True)
    )


@router.delete("/{group_id}/words/{word_id}", response_model=StandardResponse)
async def remove_word(group_id: int, word_id: int, db: Session = Depends(get_db)):
    result = group_service.remove_word_from_group(db, group_id, word_id)

    if not result["success"]:
        raise HTTPException(status_code=_status_for(result["message"]), detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"group_id": group_id, "word_id": word_id}
    )
