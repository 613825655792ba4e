from cardoracle.parsers.scryfall import (
    download_bulk_data,
    get_bulk_data_url,
    iter_bulk_cards,
    open_bulk_file,
)

__all__ = [
    "download_bulk_data",
    "get_bulk_data_url",
    "iter_bulk_cards",
    "open_bulk_file",
]
