"""
ingestion/records.py
--------------------
File loaders that stand in for the data layer in front of the engine.

Each loader accepts a ``.json`` or ``.csv`` path and returns engine input
objects.

* :func:`load_participants`  — participant assessments.  JSON holds a list of
  ``{participantId, regionId, criteria}`` objects; CSV is long format with
  one row per answer (``participant_id, region_id, group, criterion, token``).
* :func:`load_experts`       — expert assessments, reduced to the latest one
  per region (ordered by ``assessed_at`` when present, then file order).
* :func:`load_repeat_visits` — region id → repeat-visit ratio.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Union

import numpy as np
import pandas as pd

from regionrisk.core.errors import ValidationError
from regionrisk.core.models import ExpertRegionAssessment, ParticipantAssessment
from regionrisk.ingestion.normalizer import normalize_column_names

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

PARTICIPANT_COLUMNS = ["participant_id", "region_id", "group", "criterion", "token"]
EXPERT_COLUMNS = ["region_id", "safety_level"]
REPEAT_VISIT_COLUMNS = ["region_id", "repeat_visit"]


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _existing(path: PathLike) -> Path:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Input file not found: {str(p)!r}")
    if p.is_dir():
        raise ValueError(f"Expected a file path, got a directory: {str(p)!r}")
    return p


def _read_json(path: Path) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as exc:
        raise ValueError(f"Failed to parse {path.name}: {exc}") from exc


def _read_csv(path: Path, required: List[str]) -> pd.DataFrame:
    df = pd.read_csv(path, encoding="utf-8-sig", dtype=str, keep_default_na=False)
    df = normalize_column_names(df)
    missing = [c for c in required if c not in df.columns]
    if missing:
        raise ValidationError(f"{path.name} is missing required column(s): {', '.join(missing)}.")
    for col in df.columns:
        df[col] = df[col].str.strip()
    return df


def _records_from_json(data: Any, key: str, label: str) -> List[Dict[str, Any]]:
    if isinstance(data, dict) and isinstance(data.get(key), list):
        data = data[key]
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValidationError(f"{label} JSON must be a list of objects.")
    return data


# ---------------------------------------------------------------------------
# Participants
# ---------------------------------------------------------------------------

def participants_from_frame(df: pd.DataFrame) -> List[ParticipantAssessment]:
    """
    Fold a long-format answer table into participant assessments.

    Rows with an empty token are skipped; the engine reports the criterion
    as missing.  Participants keep the order of their first row.

    Raises:
        ValidationError: If a participant spans several regions or answers a
                         criterion twice with different tokens.
    """
    df = df[df["token"] != ""]

    regions_per_participant = df.groupby("participant_id", sort=False)["region_id"].nunique()
    split = regions_per_participant[regions_per_participant > 1]
    if not split.empty:
        raise ValidationError(
            f"Participant(s) assigned to more than one region: {', '.join(split.index)}."
        )

    answer_keys = ["participant_id", "group", "criterion"]
    distinct_answers = df.drop_duplicates(answer_keys + ["token"])
    conflicting = distinct_answers.duplicated(answer_keys)
    if conflicting.any():
        first = distinct_answers[conflicting].iloc[0]
        raise ValidationError(
            f"Participant {first['participant_id']} answers criterion "
            f"{first['criterion']} in group {first['group']} more than once."
        )

    participants: List[ParticipantAssessment] = []
    for participant_id, rows in df.groupby("participant_id", sort=False):
        criteria: Dict[str, Dict[str, str]] = {}
        for group, criterion, token in rows[["group", "criterion", "token"]].itertuples(index=False):
            criteria.setdefault(group, {})[criterion] = token
        participants.append(
            ParticipantAssessment(
                participant_id=str(participant_id),
                region_id=str(rows["region_id"].iloc[0]),
                criteria=criteria,
            )
        )
    return participants


def load_participants(path: PathLike) -> List[ParticipantAssessment]:
    """
    Load participant assessments from a JSON or long-format CSV file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError:        If the JSON cannot be parsed.
        ValidationError:   If a record is structurally unusable.
    """
    p = _existing(path)
    if p.suffix.lower() == ".json":
        records = _records_from_json(_read_json(p), "participants", "Participants")
        participants = [ParticipantAssessment.from_dict(r) for r in records]
    else:
        participants = participants_from_frame(_read_csv(p, PARTICIPANT_COLUMNS))
    logger.debug("Loaded %d participant assessment(s) from %s.", len(participants), p)
    return participants


# ---------------------------------------------------------------------------
# Experts
# ---------------------------------------------------------------------------

def latest_per_region(df: pd.DataFrame) -> pd.DataFrame:
    """
    Keep only the most recent expert assessment of each region.

    When an ``assessed_at`` column (or the store's ``created_at``) is present
    rows are ordered by it as ISO-8601 timestamps (rows without a parseable
    timestamp count as oldest); ties and timestamp-less tables fall back to
    file order, so the last row wins.
    """
    df = df.reset_index(drop=True)
    if "assessed_at" not in df.columns and "created_at" in df.columns:
        df = df.rename(columns={"created_at": "assessed_at"})
    df["_order"] = np.arange(len(df))
    if "assessed_at" in df.columns:
        df["_ts"] = pd.to_datetime(df["assessed_at"], errors="coerce", utc=True, format="ISO8601")
        df = df.sort_values(["_ts", "_order"], na_position="first", kind="mergesort")
        df = df.drop(columns="_ts")
    latest = df.drop_duplicates("region_id", keep="last")

    superseded = len(df) - len(latest)
    if superseded:
        logger.warning(
            "Dropped %d superseded expert assessment(s); keeping the latest per region.",
            superseded,
        )
    return latest.drop(columns="_order").sort_values("region_id", kind="mergesort")


def load_experts(path: PathLike) -> List[ExpertRegionAssessment]:
    """
    Load expert assessments and return the latest one per region, ordered by region id.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValidationError:   On a missing column or an unknown safety level.
    """
    p = _existing(path)
    if p.suffix.lower() == ".json":
        records = _records_from_json(_read_json(p), "experts", "Experts")
        df = normalize_column_names(pd.DataFrame.from_records(records))
        missing = [c for c in EXPERT_COLUMNS if c not in df.columns]
        if missing:
            raise ValidationError(f"{p.name} is missing required field(s): {', '.join(missing)}.")
        df["region_id"] = df["region_id"].astype(str)
    else:
        df = _read_csv(p, EXPERT_COLUMNS)

    if df.empty:
        return []

    latest = latest_per_region(df)
    latest = latest.astype(object).where(latest.notna(), None)
    experts = [
        ExpertRegionAssessment.from_dict(record)
        for record in latest.to_dict(orient="records")
    ]
    logger.debug("Loaded %d expert assessment(s) from %s.", len(experts), p)
    return experts


# ---------------------------------------------------------------------------
# Repeat visits
# ---------------------------------------------------------------------------

def repeat_visits_from_frame(df: pd.DataFrame) -> Dict[str, float]:
    """
    Convert a ``region_id, repeat_visit`` table to a mapping.

    Values are not clamped here; the engine clamps them to ``[0, 1]``.

    Raises:
        ValidationError: On duplicate regions or non-numeric values.
    """
    duplicated = df["region_id"][df["region_id"].duplicated()]
    if not duplicated.empty:
        raise ValidationError(
            f"Repeat-visit value given more than once for: {', '.join(sorted(set(duplicated)))}."
        )
    values = pd.to_numeric(df["repeat_visit"], errors="coerce")
    invalid = df["region_id"][~np.isfinite(values.to_numpy(dtype=float))]
    if not invalid.empty:
        raise ValidationError(
            f"Repeat-visit value is not a finite number for: {', '.join(invalid)}."
        )
    return {str(region): float(value) for region, value in zip(df["region_id"], values)}


def load_repeat_visits(path: PathLike) -> Dict[str, float]:
    """
    Load repeat-visit ratios from a JSON mapping / record list, or a CSV table.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValidationError:   On duplicates or non-numeric values.
    """
    p = _existing(path)
    if p.suffix.lower() == ".json":
        data = _read_json(p)
        if isinstance(data, dict) and "repeatVisitByRegion" in data:
            data = data["repeatVisitByRegion"]
        if isinstance(data, dict):
            df = pd.DataFrame({
                "region_id": [str(k) for k in data.keys()],
                "repeat_visit": list(data.values()),
            })
        else:
            records = _records_from_json(data, "repeat_visits", "Repeat visits")
            df = normalize_column_names(pd.DataFrame.from_records(records))
            missing = [c for c in REPEAT_VISIT_COLUMNS if c not in df.columns]
            if missing:
                raise ValidationError(f"{p.name} is missing required field(s): {', '.join(missing)}.")
            df["region_id"] = df["region_id"].astype(str)
    else:
        df = _read_csv(p, REPEAT_VISIT_COLUMNS)

    return repeat_visits_from_frame(df)
