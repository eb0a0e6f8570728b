"""
core/config_hashing.py
----------------------
Deterministic hashing of a :class:`~regionrisk.core.config.RiskModelConfig`
so every computed result can be traced back to the exact model it used.

The hash is taken over the camelCase wire form produced by
:meth:`RiskModelConfig.to_dict`, without its ``version`` key: two stored
versions holding identical model parameters hash identically.  Mapping keys
are sorted; list order (criterion keys, breakpoints) is part of the model
and is kept.
"""

from __future__ import annotations

import hashlib
import json

from regionrisk.core.config import RiskModelConfig


def canonical_config_json(config: RiskModelConfig) -> str:
    """Return the compact, key-sorted JSON text that :func:`compute_config_hash` digests."""
    wire = config.to_dict()
    wire.pop("version", None)
    return json.dumps(wire, sort_keys=True, separators=(",", ":"))


def compute_config_hash(config: RiskModelConfig) -> str:
    """
    Compute a deterministic SHA-256 hash of a :class:`RiskModelConfig`.

    Returns:
        Lowercase hex digest string (64 characters).

    Example::

        h = compute_config_hash(RiskModelConfig())
        # h == compute_config_hash(RiskModelConfig.from_dict(RiskModelConfig().to_dict()))
    """
    return hashlib.sha256(canonical_config_json(config).encode("utf-8")).hexdigest()
