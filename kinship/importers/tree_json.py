# kinship/importers/tree_json.py

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from ..schemas import TreeSnapshot


def unwrap_envelope(data: Any) -> Dict[str, Any]:
    """
    Accept either a bare tree response or the backend envelope around it.

    Expected schema:
    {
      "rootPersonId": int,
      "persons": [ { "id": int, "fullName": str, "gender": "MALE" | "FEMALE", ... }, ... ],
      "familyUnits": [ { "id": int, "partners": [...], "children": [...], ... }, ... ]
    }
    optionally wrapped as { "success": bool, "data": { ... } }.
    """
    if not isinstance(data, dict):
        raise ValueError("JSON root must be an object")
    if "rootPersonId" not in data and isinstance(data.get("data"), dict):
        data = data["data"]
    if "rootPersonId" not in data:
        raise ValueError("JSON must contain 'rootPersonId'")
    if not isinstance(data.get("persons", []), list):
        raise ValueError("'persons' must be an array")
    if not isinstance(data.get("familyUnits", []), list):
        raise ValueError("'familyUnits' must be an array")
    return data


def parse_tree_json(path: str | Path) -> TreeSnapshot:
    """Load a dumped tree response into a validated snapshot."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))

    with open(p, "r", encoding="utf-8") as f:
        data = json.load(f)

    try:
        return TreeSnapshot.model_validate(unwrap_envelope(data))
    except ValidationError as e:
        raise ValueError(f"Invalid tree snapshot in {p.name}: {e}") from e
