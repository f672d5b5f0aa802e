"""
Dashboard Statistics

Reads the four tables concurrently and derives the overview cards and charts:

    reviews   -> total reviews, average rating, rating distribution
    inquiries -> potential clients
    menu      -> menu items, category distribution
    admins    -> admins

Each read is isolated: a failed read contributes an empty result and is listed
in ``failed_sources``; the other statistics are still computed.
"""

import asyncio
from collections import Counter
from typing import Optional

from loguru import logger
from pydantic import BaseModel, Field

from caterdesk.errors import CaterDeskException
from caterdesk.notifications import Notifier
from caterdesk.storage.gateway import PersistenceGateway
from caterdesk.storage.schemas import (
    ADMIN_TABLE,
    INQUIRY_TABLES,
    MENU_TABLES,
    REVIEW_TABLE,
    InquiryGeneration,
    MenuGeneration,
)


UNCATEGORIZED = "Uncategorized"


class ChartPoint(BaseModel):
    name: str
    count: int


class DashboardStats(BaseModel):
    total_reviews: int = 0
    average_rating: float = 0.0
    total_contacts: int = 0
    total_menu_items: int = 0
    total_admins: int = 0
    rating_distribution: list[ChartPoint] = Field(default_factory=list)
    category_distribution: list[ChartPoint] = Field(default_factory=list)
    failed_sources: list[str] = Field(default_factory=list)


def rating_distribution(ratings: list[int]) -> list[ChartPoint]:
    counts = Counter(ratings)
    return [ChartPoint(name=f"{star}★", count=counts.get(star, 0)) for star in range(1, 6)]


def category_distribution(categories: list[Optional[str]]) -> list[ChartPoint]:
    counts = Counter(category or UNCATEGORIZED for category in categories)
    return [ChartPoint(name=name, count=count) for name, count in counts.items()]


def average_rating(ratings: list[int]) -> float:
    if not ratings:
        return 0.0
    return round(sum(ratings) / len(ratings), 1)


class DashboardController:
    """
    Usage:
        dashboard = DashboardController(gateway, notifier)
        stats = await dashboard.load()
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        notifier: Notifier,
        inquiry_generation: InquiryGeneration = InquiryGeneration.EVENT,
        menu_generation: MenuGeneration = MenuGeneration.CATALOG,
    ):
        self.gateway = gateway
        self.notifier = notifier
        self.inquiry_table = INQUIRY_TABLES[InquiryGeneration(inquiry_generation)]
        self.menu_table = MENU_TABLES[MenuGeneration(menu_generation)]

        self.stats = DashboardStats()
        self.loading = False

    async def load(self) -> DashboardStats:
        self.loading = True
        sources = {
            "reviews": self.gateway.select(REVIEW_TABLE.table, columns=["rating"]),
            "contacts": self.gateway.select(self.inquiry_table.table, columns=["id"]),
            "menu items": self.gateway.select(self.menu_table.table, columns=["category"]),
            "admins": self.gateway.select(ADMIN_TABLE.table, columns=["id"]),
        }

        try:
            results = await asyncio.gather(*sources.values(), return_exceptions=True)
        finally:
            self.loading = False

        rows: dict[str, list[dict]] = {}
        failed = []
        for name, result in zip(sources, results):
            if isinstance(result, BaseException):
                if not isinstance(result, CaterDeskException):
                    logger.opt(exception=result).error(f"Unexpected error reading {name}")
                failed.append(name)
                rows[name] = []
            else:
                rows[name] = result

        ratings = [int(row["rating"]) for row in rows["reviews"] if row.get("rating") is not None]
        categories = [row.get("category") for row in rows["menu items"]]

        self.stats = DashboardStats(
            total_reviews=len(rows["reviews"]),
            average_rating=average_rating(ratings),
            total_contacts=len(rows["contacts"]),
            total_menu_items=len(rows["menu items"]),
            total_admins=len(rows["admins"]),
            rating_distribution=rating_distribution(ratings),
            category_distribution=category_distribution(categories),
            failed_sources=failed,
        )

        if failed:
            self.notifier.error("Failed to fetch dashboard data", ", ".join(failed))
        return self.stats
