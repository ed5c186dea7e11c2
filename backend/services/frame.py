"""
Social frame protocol: state machine and meta-tag documents.

A frame alternates between two screens:
- input: text box plus a "Generate" button
- generated: the rendered image plus "Restyle", "Start over" and an "Open App" link

The frame keeps no server-side session. Everything needed to redraw the
current screen travels in the JSON state blob, which the client posts back
verbatim on the next button press.
"""
from __future__ import annotations

import html
import json
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from domain.models import TextTransformation
from services.generator import generate_random
from services.validation import validate_text, validate_transformation

MAX_STATE_BYTES = 4096
SEED_LIMIT = 2**31


class FrameStage(str, Enum):
    INPUT = "input"
    GENERATED = "generated"


@dataclass
class FrameState:
    stage: FrameStage = FrameStage.INPUT
    text: Optional[str] = None
    transformation: Optional[TextTransformation] = None
    seed: Optional[int] = None
    # Shown to the user on the next screen; never serialized
    error: Optional[str] = None


@dataclass
class FrameButton:
    label: str
    action: str = "post"  # "post" | "link"
    target: Optional[str] = None


@dataclass
class FrameView:
    image_url: str
    post_url: str
    state: FrameState
    buttons: List[FrameButton] = field(default_factory=list)
    input_placeholder: Optional[str] = None
    title: str = "LetterCraft"


def serialize_state(state: FrameState) -> str:
    payload = {
        "stage": state.stage.value,
        "text": state.text,
        "transformation": state.transformation.to_dict() if state.transformation else None,
        "seed": state.seed,
    }
    raw = json.dumps(payload, separators=(",", ":"))
    if len(raw.encode("utf-8")) > MAX_STATE_BYTES:
        raise ValueError("Frame state exceeds the protocol size limit")
    return raw


def parse_state(raw: Optional[str]) -> FrameState:
    """Parse a posted state blob. Anything malformed restarts at the input screen."""
    if not raw:
        return FrameState()
    try:
        payload = json.loads(raw)
        stage = FrameStage(payload.get("stage"))
        transformation_data = payload.get("transformation")
        if transformation_data is not None and validate_transformation(transformation_data):
            return FrameState()
        transformation = TextTransformation.from_dict(transformation_data) if transformation_data else None
        seed = payload.get("seed")
        state = FrameState(
            stage=stage,
            text=payload.get("text"),
            transformation=transformation,
            seed=int(seed) if seed is not None else None,
        )
    except (ValueError, TypeError, KeyError, AttributeError, OverflowError):
        return FrameState()
    if state.stage == FrameStage.GENERATED and (
        state.transformation is None or validate_text(state.text)
    ):
        return FrameState()
    return state


def _generated(text: str, rng: random.Random) -> FrameState:
    return FrameState(
        stage=FrameStage.GENERATED,
        text=text,
        transformation=generate_random(rng),
        seed=rng.randrange(SEED_LIMIT),
    )


def advance_frame(
    button_index: Optional[int],
    input_text: Optional[str],
    state: FrameState,
    rng: Optional[random.Random] = None,
) -> FrameState:
    """
    Compute the next frame state for a button press.

    input + Generate (1) with valid text -> generated
    generated + Restyle (1) -> generated with the same text and a new style
    generated + Start over (2) -> input
    Invalid text keeps the input screen and carries the error message.
    """
    rng = rng or random.Random()

    if state.stage == FrameStage.GENERATED:
        if button_index == 1:
            return _generated(state.text, rng)
        if button_index == 2:
            return FrameState()
        return state

    if button_index != 1:
        return FrameState()
    text = input_text.strip() if isinstance(input_text, str) else ""
    errors = validate_text(text)
    if errors:
        return FrameState(error=errors[0].message)
    return _generated(text, rng)


def build_frame_view(state: FrameState, public_url: str, image_url: str) -> FrameView:
    post_url = f"{public_url}/api/frame"
    if state.stage == FrameStage.GENERATED:
        return FrameView(
            image_url=image_url,
            post_url=post_url,
            state=state,
            buttons=[
                FrameButton("Restyle"),
                FrameButton("Start over"),
                FrameButton("Open App", action="link", target=public_url),
            ],
        )
    return FrameView(
        image_url=image_url,
        post_url=post_url,
        state=state,
        buttons=[FrameButton("Generate Text")],
        input_placeholder=state.error or "Type up to 100 characters...",
    )


def render_frame_html(view: FrameView) -> str:
    """Render the frame document: meta tags carry everything the client reads."""
    def meta(prop: str, content: str) -> str:
        return f'<meta property="{prop}" content="{html.escape(content, quote=True)}" />'

    tags = [
        meta("fc:frame", "vNext"),
        meta("fc:frame:image", view.image_url),
        meta("fc:frame:image:aspect_ratio", "1.91:1"),
        meta("og:image", view.image_url),
        meta("og:title", view.title),
        meta("fc:frame:post_url", view.post_url),
        meta("fc:frame:state", serialize_state(view.state)),
    ]
    if view.input_placeholder is not None:
        tags.append(meta("fc:frame:input:text", view.input_placeholder))
    for number, button in enumerate(view.buttons, start=1):
        tags.append(meta(f"fc:frame:button:{number}", button.label))
        tags.append(meta(f"fc:frame:button:{number}:action", button.action))
        if button.target:
            tags.append(meta(f"fc:frame:button:{number}:target", button.target))

    head = "\n    ".join(tags)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "  <head>\n"
        f"    <title>{html.escape(view.title)}</title>\n"
        f"    {head}\n"
        "  </head>\n"
        "  <body>\n"
        f"    <h1>{html.escape(view.title)}</h1>\n"
        "  </body>\n"
        "</html>\n"
    )
