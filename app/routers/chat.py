import logging

from fastapi import APIRouter, Depends, HTTPException
from google.genai import errors as genai_errors

from app.dependencies import get_gemini_client
from app.models.chat import ChatRequest, ChatResponse
from app.services.gemini_client import GeminiClient, GeminiNotConfiguredError

router = APIRouter(prefix="/chat", tags=["chat"])
logger = logging.getLogger(__name__)

# Worked example prepended to every chat message so answers come back as JSON
CHAT_PROMPT = """「Title: 尾道に行ってきましたー！ #絶景 #自然 #旅行  #nature #japantravel
User: @yuki_travel
Likes: 261700, Plays: 6800000
Tags: ['絶景', '自然', '旅行', 'nature', 'japantravel']
URL: https://m.tiktok.com/v/7381023303550373121」

ここで示した場所を次の形式で返答してください:
```json
{
  "name": "施設名",
  "area": "地名",
  "address": "住所",
  "category": "カテゴリ"
}
```
"""


@router.post("", response_model=ChatResponse)
async def chat(
    payload: ChatRequest,
    gemini: GeminiClient = Depends(get_gemini_client),
):
    """
    Continue a Gemini conversation about a place.

    The message is sent with the extraction example prepended, as the next
    turn after ``chatHistory``.
    """
    if not gemini.is_configured:
        raise HTTPException(status_code=503, detail="Gemini API not configured")

    history = [turn.model_dump() for turn in payload.chat_history]
    logger.info(f"Chat request: history_turns={len(history)}, msg_chars={len(payload.msg)}")

    try:
        text = await gemini.chat(history, f"{CHAT_PROMPT}\n{payload.msg}")
    except GeminiNotConfiguredError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except genai_errors.APIError as exc:
        logger.error(f"Gemini chat error: {exc}")
        raise HTTPException(status_code=500, detail="An error occurred") from exc
    except Exception as exc:
        logger.exception("Unexpected chat error")
        raise HTTPException(status_code=500, detail="An error occurred") from exc

    return ChatResponse(text=text)
