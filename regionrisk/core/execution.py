"""
core/execution.py
-----------------
Run manifest attached to every engine computation.

The manifest records which configuration produced a set of results (hash
and version), which regions were computed, and the runtime environment, so
a stored result can be audited long after the run.
"""

from __future__ import annotations

import json
import platform
import sys
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional


def _environment_fingerprint() -> Dict[str, str]:
    return {
        "python": sys.version.split()[0],
        "os": platform.system(),
        "platform": platform.platform(),
    }


@dataclass
class ExecutionManifest:
    """
    Metadata describing a single risk computation.

    Attributes:
        run_id:            Random identifier of the run.
        created_at:        UTC ISO-8601 timestamp.
        config_hash:       SHA-256 of the configuration used.
        config_version:    Version of the configuration, when known.
        regions_computed:  Region ids present in the output, ascending.
        participant_count: Number of participant assessments consumed.
        sdk_version:       regionrisk version that produced the run.
        environment:       Python / OS information.
    """

    run_id: str
    created_at: str
    config_hash: str
    config_version: Optional[int]
    regions_computed: List[str]
    participant_count: int
    sdk_version: str
    environment: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        config_hash: str,
        regions_computed: List[str],
        participant_count: int,
        config_version: Optional[int] = None,
    ) -> "ExecutionManifest":
        from regionrisk import __version__

        return cls(
            run_id=uuid.uuid4().hex,
            created_at=datetime.now(timezone.utc).isoformat(),
            config_hash=config_hash,
            config_version=config_version,
            regions_computed=list(regions_computed),
            participant_count=participant_count,
            sdk_version=__version__,
            environment=_environment_fingerprint(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "created_at": self.created_at,
            "config_hash": self.config_hash,
            "config_version": self.config_version,
            "regions_computed": list(self.regions_computed),
            "participant_count": self.participant_count,
            "sdk_version": self.sdk_version,
            "environment": dict(self.environment),
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)
