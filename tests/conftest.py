"""
Shared pytest configuration.

The API module builds its app at import time, so the narrative adapter is
pinned to the offline mock before any test module imports it.
"""

from __future__ import annotations

import os

os.environ.setdefault("LLM_ADAPTER", "mock")
