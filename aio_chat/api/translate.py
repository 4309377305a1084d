"""Translation endpoint."""

from fastapi import APIRouter

from aio_chat.models.schemas import TranslateRequest, TranslateResponse
from aio_chat.services.translation import detect_language, translate_text

router = APIRouter(prefix="/api", tags=["translate"])


@router.post("/translate", response_model=TranslateResponse)
async def translate(request: TranslateRequest) -> TranslateResponse:
    """Detect the language of text and translate it to the target language."""
    return TranslateResponse(
        original_text=request.text,
        translated_text=translate_text(request.text, request.target_language),
        detected_language=detect_language(request.text),
        target_language=request.target_language,
    )
