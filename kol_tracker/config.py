"""Core application configuration & tunable rules.

Everything that may evolve (data source selection, metric limits, document
keyword tables, import column defaults) is centralized here so it can be
adjusted without diving into service logic. Values are module constants,
optionally overridden by environment variables; tests monkeypatch the dicts.
"""
from __future__ import annotations

import os

# ------------------------------ Data Source ------------------------------- #
# "remote" -> SQLAlchemy-backed store (DATABASE_URL, see database.py)
# "static" -> in-process demo roster, nothing persists across restarts
DATA_SOURCE_MODE: str = os.getenv("DATA_SOURCE_MODE", "remote").strip().lower()

# Seed the static source with the demo roster (disable for an empty roster).
STATIC_SEED_DEMO: bool = os.getenv("STATIC_SEED_DEMO", "true").strip().lower() in {"1", "true", "yes"}

# -------------------------------- Metrics --------------------------------- #
METRICS_SETTINGS: dict[str, int | float] = {
	# How many entries the roster "top performers" list keeps
	"top_performers_limit": int(os.getenv("TOP_PERFORMERS_LIMIT", "5")),
	# Cost per mille
	"cpm_multiplier": 1000,
}

# ------------------------------- Documents -------------------------------- #
# Ordered: first matching group wins. Substrings are matched lower-cased.
DOCUMENT_SETTINGS: dict[str, object] = {
	"type_keywords": [
		("invoice", ("invoice", "inv_", "bill")),
		("msa", ("msa", "master service")),
		("contract", ("contract", "agreement", "agmt")),
	],
	"fallback_type": "other",
	"default_currency": "USD",
}

# -------------------------------- Import ---------------------------------- #
IMPORT_SETTINGS: dict[str, object] = {
	# Spreadsheet header names used when the caller supplies no mapping
	"default_mapping": {
		"name": "Name",
		"platform": "Platform",
		"profile_link": "Profile Link",
		"youtube_followers": "Youtube subscribers",
		"tiktok_followers": "TikTok Followers",
		"twitter_followers": "Twitter Followers",
		"email": "Email/Contact",
	},
	"max_rows": int(os.getenv("IMPORT_MAX_ROWS", "1000")),
}

__all__ = [
	"DATA_SOURCE_MODE",
	"STATIC_SEED_DEMO",
	"METRICS_SETTINGS",
	"DOCUMENT_SETTINGS",
	"IMPORT_SETTINGS",
]
