"""
Keyword-based event generation from a free-text description
"""

import asyncio
import calendar
import logging
from datetime import date, datetime, timedelta
from typing import Optional

from event_creator.core.config import settings
from event_creator.schemas.event import EventCategory, GenerationEntryPoint
from event_creator.services.event_aggregate import EventAggregate, new_event

logger = logging.getLogger(__name__)

class GeneratorService:
    """Derives structured event fields from a description by keyword matching"""

    # Ordered: the first matching keyword wins
    TITLE_KEYWORDS = [
        ("birthday", "Birthday Celebration"),
        ("wedding", "Wedding Celebration"),
        ("conference", "Professional Conference"),
        ("workshop", "Interactive Workshop"),
        ("meetup", "Community Meetup"),
        ("party", "Party Event"),
        ("launch", "Product Launch Event"),
    ]
    DEFAULT_TITLE = "Special Event"

    CATEGORY_KEYWORDS = [
        (("business", "conference", "workshop"), EventCategory.BUSINESS),
        (("birthday", "wedding", "anniversary"), EventCategory.CELEBRATION),
        (("meetup", "networking"), EventCategory.NETWORKING),
        (("concert", "music"), EventCategory.ENTERTAINMENT),
    ]

    LOCATION_KEYWORDS = [
        (("online", "virtual"), "Virtual Event (Online)"),
        (("park",), "Central Park"),
        (("office",), "Office Conference Room"),
        (("restaurant",), "Downtown Restaurant"),
    ]
    DEFAULT_LOCATIONS = {
        GenerationEntryPoint.GENERATOR: "To Be Announced",
        GenerationEntryPoint.LANDING: "Location not set",
    }

    COVER_IMAGES = {
        EventCategory.BUSINESS: "https://images.unsplash.com/photo-1540575467063-178a50c2df87?w=800",
        EventCategory.CELEBRATION: "https://images.unsplash.com/photo-1464366400600-7168b8af9bc3?w=800",
        EventCategory.NETWORKING: "https://images.unsplash.com/photo-1511795409834-ef04bbd61622?w=800",
        EventCategory.ENTERTAINMENT: "https://images.unsplash.com/photo-1501281668745-f7f57925c3b4?w=800",
        EventCategory.SOCIAL: "https://images.unsplash.com/photo-1523580494863-6f3031224c94?w=800",
    }

    DEFAULT_TIME = "18:00"
    DEFAULT_OFFSET_DAYS = 14

    @staticmethod
    def extract_title(text: str) -> str:
        keywords = text.lower()
        for keyword, title in GeneratorService.TITLE_KEYWORDS:
            if keyword in keywords:
                return title
        return GeneratorService.DEFAULT_TITLE

    @staticmethod
    def extract_category(text: str) -> EventCategory:
        keywords = text.lower()
        for words, category in GeneratorService.CATEGORY_KEYWORDS:
            if any(word in keywords for word in words):
                return category
        return EventCategory.SOCIAL

    @staticmethod
    def extract_location(
        text: str,
        entry_point: GenerationEntryPoint = GenerationEntryPoint.GENERATOR
    ) -> str:
        keywords = text.lower()
        for words, location in GeneratorService.LOCATION_KEYWORDS:
            if any(word in keywords for word in words):
                return location
        return GeneratorService.DEFAULT_LOCATIONS[GenerationEntryPoint(entry_point)]

    @staticmethod
    def generate_date(text: str, today: Optional[date] = None) -> date:
        """Offset the current date by the first relative-date phrase found"""
        keywords = text.lower()
        base = today or date.today()

        if "tomorrow" in keywords:
            return base + timedelta(days=1)
        if "next week" in keywords or "next friday" in keywords or "next weekend" in keywords:
            return base + timedelta(days=7)
        if "next month" in keywords:
            return add_month(base)
        return base + timedelta(days=GeneratorService.DEFAULT_OFFSET_DAYS)

    @staticmethod
    def generate_description(text: str) -> str:
        return (
            f"Join us for an amazing event! {text}\n\n"
            "We're excited to bring together wonderful people for this special occasion. "
            "Don't miss out on this opportunity to connect, celebrate, and create lasting memories."
        )

    @staticmethod
    def cover_image_for(category: EventCategory) -> str:
        return GeneratorService.COVER_IMAGES.get(
            category, GeneratorService.COVER_IMAGES[EventCategory.SOCIAL]
        )

    @staticmethod
    def generate_event(
        text: str,
        entry_point: GenerationEntryPoint = GenerationEntryPoint.GENERATOR,
        today: Optional[date] = None,
        now: Optional[datetime] = None,
        created_by: Optional[str] = None
    ) -> EventAggregate:
        """Build a draft event from a description"""
        category = GeneratorService.extract_category(text)
        return new_event(
            now=now,
            title=GeneratorService.extract_title(text),
            description=GeneratorService.generate_description(text),
            date=GeneratorService.generate_date(text, today=today),
            time=GeneratorService.DEFAULT_TIME,
            location=GeneratorService.extract_location(text, entry_point),
            category=category,
            cover_image=GeneratorService.cover_image_for(category),
            capacity=settings.DEFAULT_GENERATED_CAPACITY,
            created_by=created_by,
        )

    @staticmethod
    async def generate_event_deferred(
        text: str,
        entry_point: GenerationEntryPoint = GenerationEntryPoint.GENERATOR,
        delay: Optional[float] = None,
        created_by: Optional[str] = None
    ) -> EventAggregate:
        """Simulated generation: wait, then extract.

        Cancelling the awaiting task during the delay abandons the result.
        """
        if delay is None:
            delay = settings.GENERATION_DELAY_SECONDS
        if delay > 0:
            await asyncio.sleep(delay)
        event = GeneratorService.generate_event(text, entry_point=entry_point, created_by=created_by)
        logger.info(f"Generated event '{event.title}' ({event.category.value})")
        return event

def add_month(value: date) -> date:
    """Same day next calendar month, clamped to that month's last day"""
    year = value.year + value.month // 12
    month = value.month % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)
