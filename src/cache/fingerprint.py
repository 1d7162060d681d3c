# src/cache/fingerprint.py - v3
"""Analysis cache key derivation.

The key covers only the first 200 characters of the input plus the caller's
instructions: repeated analyses of the same document within a session hit
the cache even if a late part of the text changed.
"""

from __future__ import annotations

import hashlib

FINGERPRINT_PREFIX_CHARS = 200

# Unit separator keeps ("ab", "c") and ("a", "bc") apart.
_SEP = "\x1f"


def compute_fingerprint(text: str, instructions: str = "") -> str:
    """SHA-256 over (text[:200], instructions)."""
    material = f"{text[:FINGERPRINT_PREFIX_CHARS]}{_SEP}{instructions or ''}"
    return hashlib.sha256(material.encode("utf-8")).hexdigest()
