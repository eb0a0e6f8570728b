"""
core/config.py
--------------
Risk model configuration for the regionrisk SDK.

A :class:`RiskModelConfig` is supplied by the data layer (usually the
currently active, versioned configuration) and is treated as immutable for
the duration of one computation.  It may be built in code, parsed from the
camelCase wire format with :meth:`RiskModelConfig.from_dict`, or read from a
YAML/JSON file with :func:`load_config`.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

import yaml

from regionrisk.core.errors import ValidationError
from regionrisk.core.models import ExpertSafetyLevel


@dataclass
class Thresholds:
    """Four ascending upper bounds splitting ``[0, 1]`` into five risk-label bands."""

    very_high_max: float = 0.2
    high_max: float = 0.4
    medium_max: float = 0.6
    low_max: float = 0.8

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.very_high_max, self.high_max, self.medium_max, self.low_max)


@dataclass
class ExpertScale:
    """
    Expert safety-level scale on a 0–100 axis.

    Attributes:
        breakpoints:          Six ascending breakpoints.  Only the first and
                              last bound the final S-curve.
        label_to_upper_bound: Expert safety level → upper bound of its band.
    """

    breakpoints: Tuple[float, ...] = (0, 20, 40, 60, 80, 100)
    label_to_upper_bound: Dict[str, float] = field(default_factory=lambda: {
        "low": 20,
        "below_average": 40,
        "average": 60,
        "above_average": 80,
        "high": 100,
    })


@dataclass
class ModelWeights:
    """Optional multiplicative weights.  Participants absent here weigh 1."""

    participants: Dict[str, float] = field(default_factory=dict)
    groups: Dict[str, float] = field(default_factory=dict)

    def participant_weight(self, participant_id: str) -> float:
        return self.participants.get(participant_id, 1)


@dataclass
class RiskModelConfig:
    """
    Configuration object for the region risk model.

    Attributes:
        linguistic_scale: Linguistic token (``"l1"`` … ``"l5"``) → numeric weight.
        criteria_groups:  Group name → ordered criterion keys of that group.
        thresholds:       Risk-label band boundaries.
        expert_scale:     Expert safety-level scale.
        weights:          Optional participant / group weights.
        version:          Configuration version supplied by the data layer.
    """

    linguistic_scale: Dict[str, float] = field(default_factory=lambda: {
        "l1": 1, "l2": 2, "l3": 3, "l4": 4, "l5": 5,
    })

    criteria_groups: Dict[str, List[str]] = field(default_factory=lambda: {
        "infrastructure": ["K1", "K2", "K3", "K4", "K5"],
        "socioEcological": ["K6", "K7", "K8", "K9", "K10", "K11", "K12"],
        "medical": ["K13", "K14", "K15", "K16", "K17"],
    })

    thresholds: Thresholds = field(default_factory=Thresholds)
    expert_scale: ExpertScale = field(default_factory=ExpertScale)
    weights: ModelWeights = field(default_factory=ModelWeights)
    version: Optional[int] = None

    def validate(self) -> None:
        """Validate configuration values are finite, ordered, and positive where required."""
        if not self.linguistic_scale:
            raise ValidationError("linguistic_scale must define at least one token.")
        for token, value in self.linguistic_scale.items():
            if not _is_number(value) or value <= 0:
                raise ValidationError(
                    f"linguistic_scale[{token!r}] must be a positive finite number, got {value!r}."
                )

        if not self.criteria_groups:
            raise ValidationError("criteria_groups must define at least one group.")
        for group, keys in self.criteria_groups.items():
            if not keys:
                raise ValidationError(f"Criteria group {group!r} has no criteria.")
            if len(set(keys)) != len(keys):
                raise ValidationError(f"Criteria group {group!r} lists a criterion twice.")

        bounds = self.thresholds.as_tuple()
        if not all(_is_number(b) for b in bounds):
            raise ValidationError(f"Thresholds must be finite numbers, got {bounds!r}.")
        if not 0.0 < bounds[0] < bounds[1] < bounds[2] < bounds[3] < 1.0:
            raise ValidationError(
                f"Thresholds must be strictly ascending inside (0, 1), got {bounds!r}."
            )

        breakpoints = tuple(self.expert_scale.breakpoints)
        if len(breakpoints) != 6:
            raise ValidationError(
                f"expert_scale.breakpoints must hold six values, got {len(breakpoints)}."
            )
        if not all(_is_number(b) for b in breakpoints):
            raise ValidationError(f"Breakpoints must be finite numbers, got {breakpoints!r}.")
        if breakpoints[0] >= breakpoints[5]:
            raise ValidationError(
                f"First breakpoint must be below the last, got {breakpoints[0]!r} >= {breakpoints[5]!r}."
            )

        known_levels = {level.value for level in ExpertSafetyLevel}
        for label, bound in self.expert_scale.label_to_upper_bound.items():
            if label not in known_levels:
                raise ValidationError(f"Unknown expert safety level {label!r} in expert_scale.")
            if not _is_number(bound):
                raise ValidationError(
                    f"Expert scale value for {label!r} must be a finite number, got {bound!r}."
                )

        for kind, mapping in (("participant", self.weights.participants),
                              ("group", self.weights.groups)):
            for key, weight in mapping.items():
                if not _is_number(weight) or weight <= 0:
                    raise ValidationError(
                        f"Invalid {kind} weight for {key!r}: must be finite and > 0, got {weight!r}."
                    )

    # ------------------------------------------------------------------
    # Wire format
    # ------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RiskModelConfig":
        """
        Build a config from a mapping in either camelCase (wire) or snake_case keys.

        Missing sections fall back to the defaults of :data:`DEFAULT_CONFIG`.

        Raises:
            ValidationError: If a section has the wrong shape.
        """
        if not isinstance(data, Mapping):
            raise ValidationError("Risk model configuration must be a mapping.")

        config = cls()
        scale = _pick(data, "linguistic_scale", "linguisticScale")
        if scale is not None:
            config.linguistic_scale = {str(k): v for k, v in _as_mapping(scale, "linguisticScale").items()}

        groups = _pick(data, "criteria_groups", "criteriaGroups")
        if groups is not None:
            config.criteria_groups = {}
            for g, keys in _as_mapping(groups, "criteriaGroups").items():
                if not isinstance(keys, (list, tuple)):
                    raise ValidationError(
                        f"Criteria group {g!r} must be a list of criterion keys, got {keys!r}."
                    )
                config.criteria_groups[str(g)] = [str(k) for k in keys]

        thresholds = _pick(data, "thresholds")
        if thresholds is not None:
            t = _as_mapping(thresholds, "thresholds")
            config.thresholds = Thresholds(
                very_high_max=_pick(t, "very_high_max", "veryHighMax"),
                high_max=_pick(t, "high_max", "highMax"),
                medium_max=_pick(t, "medium_max", "mediumMax"),
                low_max=_pick(t, "low_max", "lowMax"),
            )

        expert = _pick(data, "expert_scale", "expertScale")
        if expert is not None:
            e = _as_mapping(expert, "expertScale")
            defaults = ExpertScale()
            breakpoints = _pick(e, "breakpoints")
            bounds = _pick(e, "label_to_upper_bound", "labelToUpperBound")
            config.expert_scale = ExpertScale(
                breakpoints=tuple(breakpoints) if breakpoints is not None else defaults.breakpoints,
                label_to_upper_bound=(
                    {str(k): v for k, v in _as_mapping(bounds, "labelToUpperBound").items()}
                    if bounds is not None else defaults.label_to_upper_bound
                ),
            )

        weights = _pick(data, "weights")
        if weights is not None:
            w = _as_mapping(weights, "weights")
            config.weights = ModelWeights(
                participants=dict(_as_mapping(_pick(w, "participants") or {}, "weights.participants")),
                groups=dict(_as_mapping(_pick(w, "groups") or {}, "weights.groups")),
            )

        version = _pick(data, "version")
        if version is not None and (isinstance(version, bool) or not isinstance(version, int)):
            raise ValidationError(f"Config version must be an integer, got {version!r}.")
        config.version = version
        return config

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to the camelCase wire format accepted by :meth:`from_dict`."""
        out: Dict[str, Any] = {
            "linguisticScale": dict(self.linguistic_scale),
            "criteriaGroups": {g: list(keys) for g, keys in self.criteria_groups.items()},
            "thresholds": {
                "veryHighMax": self.thresholds.very_high_max,
                "highMax": self.thresholds.high_max,
                "mediumMax": self.thresholds.medium_max,
                "lowMax": self.thresholds.low_max,
            },
            "expertScale": {
                "breakpoints": list(self.expert_scale.breakpoints),
                "labelToUpperBound": dict(self.expert_scale.label_to_upper_bound),
            },
        }
        if self.weights.participants or self.weights.groups:
            out["weights"] = {
                "participants": dict(self.weights.participants),
                "groups": dict(self.weights.groups),
            }
        if self.version is not None:
            out["version"] = self.version
        return out


def load_config(path: Union[str, Path]) -> RiskModelConfig:
    """
    Load and validate a risk model configuration from a YAML or JSON file.

    The file may either hold the configuration at its top level or wrap it
    as ``{"version": N, "config": {...}}`` the way versioned records are
    stored by the data layer.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError:        If the file cannot be parsed or is not a mapping.
        ValidationError:   If the configuration values are invalid.
    """
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            if config_path.suffix.lower() == ".json":
                data = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ValueError(f"Failed to parse config file {config_path}: {exc}") from exc

    if not isinstance(data, dict):
        raise ValueError("Config file must contain a mapping.")

    if isinstance(data.get("config"), dict):
        body = dict(data["config"])
        body.setdefault("version", data.get("version"))
        data = body

    config = RiskModelConfig.from_dict(data)
    config.validate()
    return config


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and math.isfinite(value)


def _pick(data: Mapping[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data:
            return data[key]
    return None


def _as_mapping(value: Any, label: str) -> Mapping[str, Any]:
    if not isinstance(value, Mapping):
        raise ValidationError(f"Config section {label!r} must be a mapping.")
    return value


# Default model shipped with the product.  Pass your own instance to override.
DEFAULT_CONFIG = RiskModelConfig()
