from __future__ import annotations

from dataclasses import asdict
from typing import Any, Iterable

from server_builder.core.types import Server


def _normalize(obj: Any) -> Any:
    if hasattr(obj, "value"):
        return obj.value
    if isinstance(obj, dict):
        return {str(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_normalize(v) for v in obj]
    return obj


def to_json_safe_dict(obj: Any) -> dict[str, Any]:
    """
    Convert a dataclass object into a JSON safe dict.

    Enum members become their values.
    """
    raw = asdict(obj)
    normalized = _normalize(raw)
    if not isinstance(normalized, dict):
        raise TypeError("expected dict after normalization")
    return normalized


def server_summary(server: Server) -> dict[str, Any]:
    """Operator facing view of a built server."""
    data = to_json_safe_dict(server)
    return {
        "name": server.name,
        "identifier": data["identifier"],
        "public_ip": data["public_ip"],
        "status": data["status"],
        "drives": [
            {
                "name": d["name"],
                "identifier": d["identifier"],
                "imaging": d["imaging"],
            }
            for d in data["drives"]
        ],
    }


def build_report_to_json(servers: Iterable[Server]) -> dict[str, Any]:
    """Report shape printed by the runner."""
    return {"servers": [server_summary(s) for s in servers]}
