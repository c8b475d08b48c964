"""Exportación JSON del listado de empleados.

Por qué JSON:
- Interoperabilidad con hojas de cálculo/pipelines sin depender de la tabla Rich.
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import EmployeeListQuery, EmployeeListResult


def export_employees_json(
    *,
    result: EmployeeListResult,
    query: EmployeeListQuery,
    output_path: Path,
) -> Path:
    """Exporta la página actual (y la consulta que la produjo) a JSON UTF-8 estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "query": query.model_dump(mode="json"),
        "total_pages": result.total_pages,
        "items": [item.model_dump(mode="json") for item in result.items],
    }
    output_path.write_text(
        json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True) + "\n",
        encoding="utf-8",
    )
    return output_path
