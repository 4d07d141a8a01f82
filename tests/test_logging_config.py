from __future__ import annotations

import json

from loguru import logger

from wishlist_export.core.config import Settings
from wishlist_export.core.logging_config import configure_logging, get_logger


def test_bound_logger_carries_component(settings: Settings) -> None:
    records = []
    configure_logging(settings)
    sink_id = logger.add(records.append, format="{message}")
    try:
        get_logger("SheetsClient", doc_id="doc-9").info("Wrote rows")
    finally:
        logger.remove(sink_id)

    extra = records[0].record["extra"]
    assert extra["component"] == "SheetsClient"
    assert extra["doc_id"] == "doc-9"


def test_production_logs_json_lines(settings: Settings, capsys) -> None:
    configure_logging(settings.model_copy(update={"environment": "production"}))
    try:
        get_logger("WishlistExporter").warning("Sheets request failed")
        logger.complete()
        line = capsys.readouterr().out.strip().splitlines()[-1]
    finally:
        configure_logging(settings)

    payload = json.loads(line)
    assert payload["record"]["extra"]["component"] == "WishlistExporter"
    assert payload["record"]["message"] == "Sheets request failed"
