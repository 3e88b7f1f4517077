"""
Free game deals from the CheapShark price API
"""
import requests
import logging
from typing import Any, Dict, List

from constants import (
    BUILD_VERSION,
    CHEAPSHARK_REDIRECT_URL,
    CHEAPSHARK_SOURCE,
    DEAL_STORE_NAMES,
    DEAL_STORE_TAGS,
)
from db import transaction
from exceptions import ExternalServiceException
from metrics import deals_synced_total
from repositories.deal_repository import DealRepository
from utils import parse_float

logger = logging.getLogger("main")


class CheapSharkClient:
    """Client for the CheapShark deals API"""

    def __init__(self, api_url: str, timeout: int = 15):
        self.api_url = api_url
        self.timeout = timeout
        self.session = requests.Session()
        self.session.headers.update({
            "User-Agent": f"GamePortal/{BUILD_VERSION}"
        })

    def fetch_free_deals(self) -> List[Dict[str, Any]]:
        """Deals currently priced at zero"""
        try:
            response = self.session.get(
                self.api_url,
                params={"upperPrice": 0, "exact": 0},
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"CheapShark API error: {e}")
            raise ExternalServiceException("CheapShark", "Failed to fetch deals")

        if not isinstance(data, list):
            logger.error(f"Unexpected CheapShark payload: {type(data).__name__}")
            raise ExternalServiceException("CheapShark", "Unexpected response from deal API")
        return data


def deal_values(deal: Dict[str, Any]) -> Dict[str, Any]:
    """Map one CheapShark deal onto free_game_deals columns"""
    store = DEAL_STORE_NAMES.get(str(deal.get("storeID")), "Unknown Store")
    return {
        "source": CHEAPSHARK_SOURCE,
        "source_deal_id": str(deal["dealID"]),
        "title": deal.get("title") or "Untitled",
        "store": store,
        "platform": "PC",
        "image_url": deal.get("thumb"),
        "deal_url": CHEAPSHARK_REDIRECT_URL.format(deal_id=deal["dealID"]),
        "normal_price": parse_float(deal.get("normalPrice"), None),
        "sale_price": 0.0,
        "currency": "USD",
        "tags": ["free"] + DEAL_STORE_TAGS.get(store, []),
        "ends_at": None,
    }


def sync_free_deals(session, deals: List[Dict[str, Any]]) -> int:
    """
    Upsert the free entries of `deals` in one transaction and deactivate
    previously synced CheapShark deals that are no longer listed.
    """
    synced_ids = set()
    with transaction(session):
        for deal in deals:
            if not deal.get("dealID"):
                continue
            if parse_float(deal.get("salePrice"), 0.0) > 0:
                continue
            values = deal_values(deal)
            DealRepository.upsert_deal(session, values)
            synced_ids.add(values["source_deal_id"])
        deactivated = DealRepository.deactivate_missing(session, CHEAPSHARK_SOURCE, synced_ids)

    deals_synced_total.labels(source=CHEAPSHARK_SOURCE).inc(len(synced_ids))
    logger.info(f"Synced {len(synced_ids)} free deals from CheapShark, {deactivated} expired")
    return len(synced_ids)


def run_deal_sync(session, deal_settings: Dict[str, Any]) -> int:
    client = CheapSharkClient(deal_settings["api_url"], timeout=deal_settings.get("timeout", 15))
    return sync_free_deals(session, client.fetch_free_deals())
