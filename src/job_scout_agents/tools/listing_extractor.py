"""Extracts listing summaries from a rendered search results page."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pydantic import ValidationError

from job_scout_agents.tools.eligibility import filter_job_title
from job_scout_core.constants import (
    CARD_COMPANY_SELECTOR,
    CARD_EASY_APPLY_SELECTOR,
    CARD_LINK_SELECTOR,
    CARD_LOCATION_SELECTOR,
    CARD_TITLE_SELECTORS,
    EASY_APPLY_LABEL,
    LISTING_CARD_SELECTOR,
)
from job_scout_core.models.listing import ListingSummary

if TYPE_CHECKING:
    from job_scout_core.interfaces.driver import NavigationDriver

logger = structlog.get_logger()

# Reads every rendered card; a card that throws is reported, not fatal.
_EXTRACT_CARDS_JS = """
(sel) => {
  const text = (root, selector) => {
    const el = root.querySelector(selector);
    return el && el.textContent ? el.textContent.trim() : null;
  };
  return Array.from(document.querySelectorAll(sel.card)).map((card) => {
    try {
      let title = null;
      for (const selector of sel.titles) {
        title = text(card, selector);
        if (title) break;
      }
      const link = card.querySelector(sel.link);
      return {
        title,
        company: text(card, sel.company),
        location: text(card, sel.location),
        easyApply: text(card, sel.easyApply),
        link: link && link.href ? link.href : null,
      };
    } catch (e) {
      return { error: String(e) };
    }
  });
}
"""


def _clean(value: object) -> str:
    """Collapse whitespace; 'N/A' for missing values."""
    if not value:
        return "N/A"
    return " ".join(str(value).split()) or "N/A"


def parse_card(raw: dict[str, Any]) -> ListingSummary | None:
    """Build a summary from one card's raw fields; None when it has no title."""
    if raw.get("error"):
        msg = str(raw["error"])
        raise ValueError(msg)
    title = _clean(raw.get("title"))
    if title == "N/A":
        return None
    return ListingSummary(
        title=title,
        company=_clean(raw.get("company")),
        location=_clean(raw.get("location")),
        easy_apply_badge=_clean(raw.get("easyApply")) == EASY_APPLY_LABEL,
        listing_url=_clean(raw.get("link")),
    )


class ListingExtractor:
    """Turns the currently rendered cards into title-filtered listing summaries."""

    def __init__(self, driver: NavigationDriver) -> None:
        """Initialize with the navigation driver."""
        self._driver = driver

    async def extract(self) -> list[ListingSummary]:
        """Re-scan every rendered card and return eligible listings in card order."""
        raw_cards: list[dict[str, Any]] = await self._driver.evaluate(
            _EXTRACT_CARDS_JS,
            {
                "card": LISTING_CARD_SELECTOR,
                "titles": list(CARD_TITLE_SELECTORS),
                "link": CARD_LINK_SELECTOR,
                "company": CARD_COMPANY_SELECTOR,
                "location": CARD_LOCATION_SELECTOR,
                "easyApply": CARD_EASY_APPLY_SELECTOR,
            },
        ) or []

        listings: list[ListingSummary] = []
        rejected = 0
        for index, raw in enumerate(raw_cards):
            try:
                listing = parse_card(raw)
            except (ValueError, ValidationError, AttributeError) as e:
                logger.warning("card_extraction_failed", index=index, error=str(e))
                continue
            if listing is None:
                continue
            if not filter_job_title(listing.title):
                rejected += 1
                logger.debug("title_filtered", title=listing.title)
                continue
            listings.append(listing)

        logger.info(
            "listings_extracted",
            cards=len(raw_cards),
            kept=len(listings),
            title_filtered=rejected,
        )
        return listings
