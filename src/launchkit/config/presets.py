"""
Starter config for the API cost tracker.

Written to disk the first time the tracker runs without a config file, so the
user has a complete example to edit: two providers (one scraped from a pricing
page, one priced by hand) and two projects.
"""

import json
from pathlib import Path
from typing import Any

import structlog

logger = structlog.get_logger()

__all__ = [
    "SAMPLE_TRACKER_CONFIG",
    "write_sample_config",
]

SAMPLE_TRACKER_CONFIG: dict[str, Any] = {
    "currency": "£",
    "overallMonthlyBudget": 500,
    "providers": {
        "vertex_ai": {
            "displayName": "Vertex AI",
            "pricing": {
                "type": "web",
                "unit": "call",
                "url": "https://cloud.google.com/vertex-ai/pricing",
                "regex": "\\$([0-9.]+) per document",
                "fallbackPrice": 0.012,
                "note": "Fallback uses a manual per-call price if scraping fails",
            },
            "monthlyBudget": 120,
            "optimization": {
                "alternative": "claude_haiku",
                "eligibleUsageRatio": 0.73,
                "note": "Chronology extraction paths can use Claude Haiku at similar quality",
            },
        },
        "claude_haiku": {
            "displayName": "Claude Haiku",
            "pricing": {
                "type": "manual",
                "unit": "call",
                "price": 0.008,
                "note": "Manual pricing per API call",
            },
            "monthlyBudget": 80,
        },
    },
    "projects": [
        {
            "name": "Chronology Extractor",
            "provider": "vertex_ai",
            "monthToDate": {"calls": 620, "tokens": 0},
            "recent7Days": {"calls": 140, "tokens": 0},
            "threshold": {"monthlyBudget": 50},
        },
        {
            "name": "Timeline QA",
            "provider": "claude_haiku",
            "monthToDate": {"calls": 320},
            "recent7Days": {"calls": 75},
        },
    ],
}


def write_sample_config(path: Path) -> Path:
    """Write the starter config to ``path``, creating parent directories.

    Returns:
        The path that was written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        json.dumps(SAMPLE_TRACKER_CONFIG, indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info("config.sample_written", path=str(path))
    return path
