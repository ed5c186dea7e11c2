"""
Social frame API routes.

GET returns the opening frame; POST advances the frame state machine and
renders the next screen.
"""
import logging
import random
from typing import Any, Dict, Optional

from fastapi import APIRouter, Body
from fastapi.responses import HTMLResponse

from db import SessionLocal
from domain.errors import AuthenticationError
from domain.models import GeneratedText
from repositories import GeneratedTextsRepository, UsageRepository, UsersRepository
from services.auth import authenticate_frame_user
from services.frame import FrameStage, FrameState, advance_frame, build_frame_view, parse_state, render_frame_html
from services.rasterizer import SHARE_CARD_SIZE, render
from settings import settings
from storage.file_storage import FileStorage

router = APIRouter()
storage = FileStorage(settings.MEDIA_ROOT)
users_repo = UsersRepository()
generated_repo = GeneratedTextsRepository()
usage_repo = UsageRepository()
logger = logging.getLogger(__name__)


def _intro_image_url() -> str:
    return f"{settings.PUBLIC_URL}/api/og"


def _button_index(untrusted: Dict[str, Any]) -> Optional[int]:
    try:
        return int(untrusted.get("buttonIndex"))
    except (TypeError, ValueError, OverflowError):
        return None


@router.get("", response_class=HTMLResponse)
async def frame_start():
    view = build_frame_view(FrameState(), settings.PUBLIC_URL, _intro_image_url())
    return HTMLResponse(render_frame_html(view))


@router.post("", response_class=HTMLResponse)
def frame_action(body: Any = Body(None)):
    """
    Handle a frame button press.

    The posted state is trusted only after re-validation; a generated screen
    renders its image with the seed stored in the state.
    """
    untrusted = body.get("untrustedData") if isinstance(body, dict) else None
    if not isinstance(untrusted, dict):
        untrusted = {}
    state = parse_state(untrusted.get("state"))

    with SessionLocal() as session:
        user = authenticate_frame_user(session, untrusted)
        if user is None and settings.FRAME_AUTH_REQUIRED:
            raise AuthenticationError("Frame signature missing or expired")

        next_state = advance_frame(_button_index(untrusted), untrusted.get("inputText"), state)
        image_url = _intro_image_url()
        if next_state.stage == FrameStage.GENERATED:
            png = render(
                next_state.text,
                next_state.transformation,
                size=SHARE_CARD_SIZE,
                rng=random.Random(next_state.seed),
            )
            image_path = storage.save_frame_image(png)
            image_url = f"{settings.PUBLIC_URL}/media/{image_path}"
            if user:
                generated_repo.create_generated_text(
                    session,
                    GeneratedText(
                        id=GeneratedText.generate_id(),
                        user_id=user.id,
                        text=next_state.text,
                        transformation=next_state.transformation,
                        image_path=image_path,
                    ),
                )
                users_repo.increment_generated_count(session, user.id)
                usage_repo.increment_usage(session, user.id, "frame_generate")
            logger.info("[frame] generated %s (user=%s)", image_path, user.id if user else None)

    view = build_frame_view(next_state, settings.PUBLIC_URL, image_url)
    return HTMLResponse(render_frame_html(view))
