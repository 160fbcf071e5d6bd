# wordsy/api/chat.py - Conversation practice
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from typing import List, Optional

from wordsy.services import chat_service
from wordsy.services.content_service import ContentGenerator, get_content_generator
from wordsy.utils import StandardResponse

router = APIRouter()


class ChatMessage(BaseModel):
    role: str  # user, assistant
    content: str


class ChatRequest(BaseModel):
    language: Optional[str] = None
    messages: List[ChatMessage]


@router.post("/", response_model=StandardResponse)
def chat(request: ChatRequest, generator: ContentGenerator = Depends(get_content_generator)):
    """Short reply in the practice language to the conversation so far"""
    result = chat_service.chat_reply(
        [message.model_dump() for message in request.messages],
        generator,
        language=request.language
    )

    if not result["success"]:
        raise HTTPException(status_code=400, detail=result["message"])

    return StandardResponse(
        status_code=200,
        is_success=True,
        details=result["message"],
        data={"reply": result["reply"], "language": result["language"]}
    )
