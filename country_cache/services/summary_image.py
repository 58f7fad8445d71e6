"""Render the refresh summary PNG."""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from pathlib import Path
from typing import Optional, Sequence, Union

from PIL import Image, ImageDraw, ImageFont

from country_cache.config import Config
from country_cache.database.models import Country

logger = logging.getLogger(__name__)

CANVAS_SIZE = (1200, 600)
BACKGROUND = (255, 255, 255)
TEXT_COLOR = (0, 0, 0)
LEFT = 20
TITLE_Y = 20
TOTAL_Y = 80
TIMESTAMP_Y = 120
HEADER_Y = 170
FIRST_ROW_Y = 210
ROW_STEP = 34
TITLE_SIZE = 36
TEXT_SIZE = 20

FONT_CANDIDATES = ("DejaVuSans.ttf", "Arial.ttf", "arial.ttf")


def format_gdp(value: Optional[Union[Decimal, float]]) -> str:
    """Thousands separators and two decimals, "N/A" when unknown."""
    if value is None:
        return "N/A"
    return f"{value:,.2f}"


def format_timestamp(value: datetime) -> str:
    """UTC timestamp as ``YYYY-MM-DD HH:MM:SSZ``."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%d %H:%M:%SZ")


def load_font(size: int) -> ImageFont.ImageFont:
    for candidate in FONT_CANDIDATES:
        try:
            return ImageFont.truetype(candidate, size)
        except OSError:
            continue
    return ImageFont.load_default(size=size)


class SummaryImageGenerator:
    """Draw total count, refresh time and top countries by GDP to a PNG file."""

    def __init__(self, path: Union[str, Path] = Config.SUMMARY_IMAGE_PATH):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def render(
        self,
        total_countries: int,
        top_countries: Sequence[Country],
        refreshed_at: datetime,
    ) -> Path:
        """
        Render and save the summary image, overwriting any previous one.

        Args:
            total_countries: Number of rows in the store
            top_countries: Up to five countries, highest estimated GDP first
            refreshed_at: Timestamp of the refresh cycle

        Returns:
            Path of the written PNG
        """
        image = Image.new("RGB", CANVAS_SIZE, color=BACKGROUND)
        draw = ImageDraw.Draw(image)
        title_font = load_font(TITLE_SIZE)
        text_font = load_font(TEXT_SIZE)

        draw.text((LEFT, TITLE_Y), "Countries Summary", fill=TEXT_COLOR, font=title_font)
        draw.text((LEFT, TOTAL_Y), f"Total countries: {total_countries}", fill=TEXT_COLOR, font=text_font)
        draw.text(
            (LEFT, TIMESTAMP_Y),
            f"Last refresh (UTC): {format_timestamp(refreshed_at)}",
            fill=TEXT_COLOR,
            font=text_font,
        )
        draw.text((LEFT, HEADER_Y), "Top 5 by Estimated GDP:", fill=TEXT_COLOR, font=text_font)

        y = FIRST_ROW_Y
        for rank, country in enumerate(top_countries[:5], start=1):
            line = f"{rank}. {country.name} — {format_gdp(country.estimated_gdp)}"
            draw.text((LEFT, y), line, fill=TEXT_COLOR, font=text_font)
            y += ROW_STEP

        self.path.parent.mkdir(parents=True, exist_ok=True)
        image.save(self.path, format="PNG")
        logger.info(f"Saved summary image to {self.path}")
        return self.path
