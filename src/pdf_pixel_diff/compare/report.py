"""JSON reports for comparison results."""

import json
from datetime import datetime, timezone
from pathlib import Path

from .batch import CompareResult

RESULT_FILENAME = "result.json"


def write_result_json(
    result: CompareResult,
    output_path: Path,
    extra: dict | None = None,
) -> Path:
    """Write a comparison result as JSON.

    Args:
        result: Result to serialize.
        output_path: Destination file.
        extra: Additional top-level fields (e.g. the compared sources).

    Returns:
        The path written.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = result.to_dict()
    data["generated_at"] = datetime.now(tz=timezone.utc).isoformat()
    if extra:
        data.update(extra)

    output_path.write_text(
        json.dumps(data, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
