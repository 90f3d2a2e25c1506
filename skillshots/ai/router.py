from fastapi import APIRouter, Depends
from fastapi.responses import Response

from skillshots.ai.schemas import ChatRequest, SpeechRequest, VideoSummaryRequest
from skillshots.ai.services import ContentGenerationService
from skillshots.auth.dependencies import get_current_user, get_generator
from skillshots.catalog.models import User

router = APIRouter(prefix="/ai", tags=["AI Assistant"])

# Gemini TTS returns 16-bit mono PCM at 24kHz
SPEECH_MEDIA_TYPE = "audio/L16;rate=24000;channels=1"


@router.post("/chat")
async def chat(
    payload: ChatRequest,
    user: User = Depends(get_current_user),
    generator: ContentGenerationService = Depends(get_generator),
):
    reply = await generator.chat(payload.prompt, payload.use_thinking_mode, payload.system_instruction)
    return {"status": "success", "output": reply}


@router.post("/analyze-video")
async def analyze_video(
    payload: VideoSummaryRequest,
    user: User = Depends(get_current_user),
    generator: ContentGenerationService = Depends(get_generator),
):
    summary = await generator.summarize_video(payload.video_title)
    return {"status": "success", "output": summary}


@router.post("/tts")
async def text_to_speech(
    payload: SpeechRequest,
    user: User = Depends(get_current_user),
    generator: ContentGenerationService = Depends(get_generator),
):
    audio = await generator.synthesize_speech(payload.text)
    return Response(content=audio, media_type=SPEECH_MEDIA_TYPE)
