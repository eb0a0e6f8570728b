"""ingestion sub-package — file loaders feeding the engine."""

from regionrisk.ingestion.normalizer import normalize_column_names
from regionrisk.ingestion.records import load_participants, load_experts, load_repeat_visits

__all__ = ["normalize_column_names", "load_participants", "load_experts", "load_repeat_visits"]
