"""Title card rendering: one 1280x720 PNG per headline."""

import asyncio
import io
import logging
from dataclasses import dataclass
from typing import Sequence

from PIL import Image, ImageDraw, ImageFont

from app.config import Settings, get_settings
from app.errors import RenderError
from app.rss.models import Headline

from .dates import format_published_at
from .wrap import wrap_text

logger = logging.getLogger(__name__)

CANVAS_WIDTH = 1280
CANVAS_HEIGHT = 720
MARGIN_X = 80
TEXT_WIDTH = CANVAS_WIDTH - 2 * MARGIN_X
FOOTER_Y = CANVAS_HEIGHT - 80

MASTHEAD = "आज की सुर्ख़ियाँ"

BACKGROUND_START = (15, 23, 42)  # #0f172a
BACKGROUND_END = (30, 41, 59)  # #1e293b
OVERLAY_TOP = (15, 23, 42, 51)  # 20% opacity
OVERLAY_BOTTOM = (8, 47, 73, 204)  # 80% opacity

MASTHEAD_FILL = (255, 255, 255, 235)
TITLE_FILL = (226, 232, 240, 245)
DESCRIPTION_FILL = (203, 213, 225, 230)
FOOTER_FILL = (148, 163, 184, 242)


@dataclass(frozen=True)
class TextBlock:
    """Layout of one wrapped text region."""

    y: int
    font_size: int
    line_height: int
    max_lines: int


TITLE_BLOCK = TextBlock(y=220, font_size=34, line_height=58, max_lines=3)
DESCRIPTION_BLOCK = TextBlock(y=420, font_size=28, line_height=46, max_lines=4)
MASTHEAD_FONT_SIZE = 56
COUNTER_FONT_SIZE = 26
DATE_FONT_SIZE = 24


@dataclass(frozen=True)
class Frame:
    """A rendered frame, named for the encoder's input pattern."""

    index: int
    name: str
    data: bytes


def frame_name(index: int, ext: str = "png") -> str:
    """Return the zero-padded frame filename, e.g. ``frame007.png``."""
    return f"frame{index:03d}.{ext}"


_default_font_warned = False


def load_font(path: str, size: int) -> ImageFont.FreeTypeFont:
    """Load a TrueType font, falling back to Pillow's bundled font.

    The bundled font has no Devanagari glyphs, so the first fallback caused
    by an unset path is logged as a warning.
    """
    global _default_font_warned

    if path:
        try:
            return ImageFont.truetype(path, size)
        except OSError as e:
            logger.warning(f"Could not load font {path}: {e}")
    elif not _default_font_warned:
        _default_font_warned = True
        logger.warning(
            "No font configured (HV_FONT_PATH); Hindi text will render without glyphs"
        )
    return ImageFont.load_default(size=size)


def _gradient_masks(size: tuple[int, int]) -> tuple[Image.Image, Image.Image]:
    """Return (horizontal, vertical) 0..255 ramps covering ``size``."""
    ramp = Image.linear_gradient("L")
    vertical = ramp.resize(size)
    horizontal = ramp.transpose(Image.Transpose.ROTATE_90).resize(size)
    return horizontal, vertical


def paint_background(size: tuple[int, int] = (CANVAS_WIDTH, CANVAS_HEIGHT)) -> Image.Image:
    """Paint the diagonal base gradient and the vertical contrast overlay."""
    width, height = size
    horizontal, vertical = _gradient_masks(size)

    # Projection onto the (0,0)-(w,h) diagonal
    diagonal = Image.blend(horizontal, vertical, height**2 / (width**2 + height**2))
    base = Image.composite(
        Image.new("RGB", size, BACKGROUND_END),
        Image.new("RGB", size, BACKGROUND_START),
        diagonal,
    )

    overlay = Image.composite(
        Image.new("RGBA", size, OVERLAY_BOTTOM),
        Image.new("RGBA", size, OVERLAY_TOP),
        vertical,
    )
    return Image.alpha_composite(base.convert("RGBA"), overlay).convert("RGB")


def draw_wrapped_text(
    draw: ImageDraw.ImageDraw,
    text: str,
    x: int,
    y: int,
    font: ImageFont.FreeTypeFont,
    fill: tuple[int, int, int, int],
    max_width: int,
    line_height: int,
    max_lines: int,
) -> int:
    """Draw greedily wrapped text and return the baseline below the last line."""

    def measure(value: str) -> float:
        return draw.textlength(value, font=font)

    current_y = y
    for line in wrap_text(text, measure, max_width, max_lines):
        draw.text((x, current_y), line, font=font, fill=fill, anchor="ls")
        current_y += line_height
    return current_y


def render_frame(
    headline: Headline,
    index: int,
    total: int,
    settings: Settings | None = None,
) -> Frame:
    """
    Render one headline as a PNG title card.

    Args:
        headline: The headline to draw
        index: 0-based position of the headline in feed order
        total: Number of headlines in this run
        settings: Settings to use for fonts and locale (defaults to app settings)

    Returns:
        Frame with the deterministic name ``frameNNN.png`` and PNG bytes

    Raises:
        RenderError: If fonts or the image surface are unusable
    """
    settings = settings or get_settings()

    try:
        image = paint_background()
        draw = ImageDraw.Draw(image, "RGBA")

        draw.text(
            (MARGIN_X, 140),
            MASTHEAD,
            font=load_font(settings.font_path, MASTHEAD_FONT_SIZE),
            fill=MASTHEAD_FILL,
            anchor="ls",
        )

        draw_wrapped_text(
            draw,
            headline.title,
            MARGIN_X,
            TITLE_BLOCK.y,
            load_font(settings.font_path, TITLE_BLOCK.font_size),
            TITLE_FILL,
            TEXT_WIDTH,
            TITLE_BLOCK.line_height,
            TITLE_BLOCK.max_lines,
        )

        if headline.description:
            draw_wrapped_text(
                draw,
                headline.description,
                MARGIN_X,
                DESCRIPTION_BLOCK.y,
                load_font(settings.font_path, DESCRIPTION_BLOCK.font_size),
                DESCRIPTION_FILL,
                TEXT_WIDTH,
                DESCRIPTION_BLOCK.line_height,
                DESCRIPTION_BLOCK.max_lines,
            )

        latin_font_path = settings.font_path_latin or settings.font_path
        draw.text(
            (CANVAS_WIDTH - MARGIN_X, FOOTER_Y),
            f"{index + 1} / {total}",
            font=load_font(latin_font_path, COUNTER_FONT_SIZE),
            fill=FOOTER_FILL,
            anchor="rs",
        )

        caption = format_published_at(
            headline.published_at,
            locale=settings.display_locale,
            tz_name=settings.display_timezone,
        )
        draw.text(
            (MARGIN_X, FOOTER_Y),
            caption,
            font=load_font(settings.font_path, DATE_FONT_SIZE),
            fill=FOOTER_FILL,
            anchor="ls",
        )

        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise RenderError(f"Failed to render frame {index}: {e}") from e

    return Frame(index=index, name=frame_name(index), data=buffer.getvalue())


async def render_frames(
    headlines: Sequence[Headline],
    settings: Settings | None = None,
) -> list[Frame]:
    """Render all headlines concurrently on worker threads.

    Frames are returned ordered by their index, independent of the order in
    which the renders complete.
    """
    total = len(headlines)
    frames = await asyncio.gather(
        *(
            asyncio.to_thread(render_frame, headline, index, total, settings)
            for index, headline in enumerate(headlines)
        )
    )
    return sorted(frames, key=lambda frame: frame.index)
