from __future__ import annotations
import os

# Store DSNs: "sqlite:///path" | "memory://" (remote), "json:///path" | "memory://" (local)
REMOTE_DSN: str = os.environ.get("COACH_REMOTE_DSN", "memory://")
LOCAL_DSN: str = os.environ.get("COACH_LOCAL_DSN", "memory://")

# Key under which the local fallback list is serialized
LOCAL_KEY: str = os.environ.get("COACH_LOCAL_KEY", "eng_improve_history")

# Remote table name
REMOTE_TABLE: str = "history"

# /* ~~~ report export ~~~ */
REPORT_TITLE: str = os.environ.get("COACH_REPORT_TITLE", "English Coach Report")
REPORT_MARGIN_MM: int = 18

# Analysis modes the upstream service understands
ANALYSIS_MODES = ("grammar", "improve", "casual")

VERBOSE: bool = os.environ.get("COACH_VERBOSE") == "1"
