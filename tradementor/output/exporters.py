"""Export utilities for recovered responses."""

import json
from pathlib import Path
from typing import Any

from tradementor.recovery.pipeline import RecoveryResult


class JSONExporter:
    """Export recovery results to JSON."""

    def to_dict(self, result: RecoveryResult) -> dict[str, Any]:
        """Wire-format value plus recovery metadata."""
        return {
            "value": result.value.to_json_dict(),
            "recovery": {
                "stage": result.stage.value,
                "confidence": result.confidence.value,
                "defaulted": list(result.defaulted),
            },
        }

    def to_string(self, result: RecoveryResult) -> str:
        """Convert a recovery result to a JSON string."""
        return json.dumps(self.to_dict(result), indent=2)

    def export(self, result: RecoveryResult, file_path: str | Path) -> None:
        """Write a recovery result to a JSON file."""
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(self.to_string(result))
