from __future__ import annotations
from typing import Dict, Any, List


def fleet_summary_md(window: str, totals: Dict[str, Any], impact: Dict[str, Any] | None = None,
                     currency: str = "SAR", warnings: List[str] | None = None) -> str:
    lines = [f"# Fleet Summary ({window})", ""]
    lines.append(f"- recovered_liters: {totals.get('recovered_liters', 0):,.0f}")
    for k in ("revenue", "expenses", "profit"):
        lines.append(f"- {k}: {totals.get(k, 0):,.2f} {currency}")
    lines.append(f"- profit_margin: {totals.get('profit_margin', 0) * 100:.1f}%")
    if impact:
        lines.append("\n## Environmental Impact")
        for k, v in impact.items():
            lines.append(f"- {k}: {v}")
    if warnings:
        lines.append("\n## Warnings")
        for w in warnings:
            lines.append(f"- {w}")
    return "\n".join(lines) + "\n"


def validation_report_md(checks: Dict[str, bool], details: Dict[str, Any] | None = None) -> str:
    lines = ["# Validation Report", ""]
    for k, ok in checks.items():
        lines.append(f"- {k}: {'PASS' if ok else 'FAIL'}")
    if details:
        lines.append("\n## Details")
        for k, v in details.items():
            lines.append(f"- {k}: {v}")
    return "\n".join(lines) + "\n"
