from __future__ import annotations

import hashlib
import uuid


def new_run_id() -> str:
    """Return a fresh identifier for one build run."""
    return uuid.uuid4().hex


def compute_cache_bust_token(run_id: str, relative_path: str) -> str:
    """Compute a 16-hex cache-busting token for one asset.

    token = sha1(<run-id>|<relative-path>)[:16]
    The relative path is normalized to lowercase with forward slashes, so the
    same asset always gets the same token within a run and a different token
    in every other run.
    """

    seed = "|".join([run_id, relative_path.replace("\\", "/").lower()])
    digest = hashlib.sha1(seed.encode("utf-8")).hexdigest()
    return digest[:16]
