"""
Human-readable summaries for tool responses.

Tools never return raw provider payloads except for single-card lookup.
"""

import json
from collections.abc import Sequence

from cardoracle.config import SEARCH_PAGE_SIZE
from cardoracle.models.card import CardCollection, CardList, ScryfallCard
from cardoracle.services.card_store import StoreHit, StoreStats

SCRYFALL_CARD_URL = "https://scryfall.com/card"


def card_permalink(card: ScryfallCard) -> str:
    return f"{SCRYFALL_CARD_URL}/{card.set}/{card.collector_number}"


def format_card_line(card: ScryfallCard) -> str:
    """
    One bulleted entry.

    Example:
        • Lightning Bolt (Magic 2010) - Instant [{R}]
          Link: https://scryfall.com/card/m10/146
    """
    cost = f" [{card.mana_cost}]" if card.mana_cost else ""
    link = card_permalink(card)
    return f"• {card.name} ({card.set_name}) - {card.type_line}{cost}\n  Link: {link}"


def format_search_results(result: CardList, page: int | None = None) -> str:
    """Summarize a search page; adds a pagination hint only when more pages exist."""
    current_page = page or 1
    text = f"Found {result.total_cards} cards matching your search:\n\n"
    text += "\n\n".join(format_card_line(card) for card in result.data)

    if result.has_more:
        offset = (current_page - 1) * SEARCH_PAGE_SIZE
        text += (
            f"\n\nShowing cards {offset + 1}-{offset + len(result.data)} "
            f"of {result.total_cards}. Use page parameter to see more results."
        )
    return text


def format_collection_results(result: CardCollection, requested: int) -> str:
    """Summarize a collection lookup as found vs not-found entries."""
    text = f"Collection lookup results: Found {len(result.data)} of {requested} cards\n\n"

    if result.data:
        text += "Found cards:\n"
        text += "\n\n".join(format_card_line(card) for card in result.data)

    if result.not_found:
        text += f"\n\nNot found ({len(result.not_found)}):\n"
        text += "\n".join(f"• {item.name or 'Unknown card'}" for item in result.not_found)

    return text


def format_card_json(card: ScryfallCard) -> str:
    """Pretty-printed card, limited to the fields the provider actually sent."""
    data = card.model_dump(mode="json", exclude_unset=True)
    return json.dumps(data, indent=2, ensure_ascii=False)


def format_store_hits(query: str, hits: Sequence[StoreHit]) -> str:
    if not hits:
        return f'No cards in the database matched "{query}".'

    lines = [f'Found {len(hits)} cards similar to "{query}":', ""]
    for hit in hits:
        cost = f" [{hit.mana_cost}]" if hit.mana_cost else ""
        line = f"• {hit.name} ({hit.set_name}) - {hit.type_line}{cost}"
        if hit.distance is not None:
            line += f" (distance {hit.distance:.3f})"
        elif hit.score is not None:
            line += f" (score {hit.score:.3f})"
        lines.append(line)
    return "\n".join(lines)


def format_store_stats(stats: StoreStats) -> str:
    lines = ["📊 Database statistics", ""]
    names = ", ".join(stats.collections) or "none"
    lines.append(f"Collections ({len(stats.collections)}): {names}")
    if stats.total_count is None:
        lines.append(f"Collection {stats.collection} does not exist yet.")
    else:
        lines.append(f"Cards in {stats.collection}: {stats.total_count}")
    return "\n".join(lines)
