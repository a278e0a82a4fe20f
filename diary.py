# Diary records from the contract: entry mapping, stats and the full reload.
import logging
import time
from datetime import datetime

import pandas as pd

import config
import contract

logger = logging.getLogger(__name__)


def _to_int(value) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError):
        return 0


def parse_entry_id(business_id: str) -> int:
    digits = str(business_id).removeprefix(config.BUSINESS_ID_PREFIX)
    head = ""
    for ch in digits:
        if not ch.isdigit():
            break
        head += ch
    return int(head) if head else int(time.time() * 1000)


def to_entry(business_id: str, data: dict) -> dict:
    public_value1 = _to_int(data.get("publicValue1"))
    return {
        "id": parse_entry_id(business_id),
        "businessId": business_id,
        "title": data.get("name") or "",
        "content": data.get("description") or "",
        "mood": public_value1,
        "date": _to_int(data.get("timestamp")),
        "creator": data.get("creator") or "",
        "publicValue1": public_value1,
        "publicValue2": _to_int(data.get("publicValue2")),
        "isVerified": bool(data.get("isVerified")),
        "decryptedValue": _to_int(data.get("decryptedValue")),
    }


def compute_stats(entries: list, now: float | None = None) -> dict:
    now = time.time() if now is None else now
    total = len(entries)
    return {
        "totalEntries": total,
        "verifiedEntries": sum(1 for e in entries if e["isVerified"]),
        "avgMood": sum(e["mood"] for e in entries) / total if total else 0,
        "recentEntries": sum(1 for e in entries if now - e["date"] < config.RECENT_WINDOW_SECONDS),
    }


def load_data(state, client=None, now: float | None = None) -> bool:
    """Reload all diaries into `state`. Returns True when the list was replaced."""
    if not state.connected:
        return False
    state.start_refresh()
    try:
        client = client or contract.get_contract_read_only()
        if client is None:
            return False
        business_ids = client.get_all_business_ids()
        entries = []
        for business_id in business_ids:
            try:
                entries.append(to_entry(business_id, client.get_business_data(business_id)))
            except Exception:
                logger.exception("Error loading diary data for %s", business_id)
        state.finish_refresh(entries, compute_stats(entries, now))
        return True
    except Exception:
        logger.exception("Failed to load diaries")
        state.fail_refresh()
        return False
    finally:
        state.end_refresh()


def find_entry(entries: list, business_id: str) -> dict | None:
    return next((e for e in entries if e["businessId"] == business_id), None)


# Average public mood per calendar day, oldest first.
def mood_by_day(entries: list) -> pd.DataFrame:
    if not entries:
        return pd.DataFrame(columns=["day", "mood"]).set_index("day")
    df = pd.DataFrame([
        {"day": datetime.fromtimestamp(e["date"]).strftime("%Y-%m-%d"), "mood": e["mood"]}
        for e in entries
    ])
    return df.groupby("day")[["mood"]].mean().sort_index()
