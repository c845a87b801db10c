"""
Cost Report — Per-run aggregation and text rendering of the cost tracker.

CostTracker.build_report() fills a CostReport; ReportRenderer turns it into
the multi-section text printed by ``api-cost-tracker``. Totals live in the
report value, never in module state.
"""

import calendar
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any

ALERT_RATIO = 0.9


def format_currency(currency: str, value: float) -> str:
    """``"<symbol><amount>"`` with two decimals and no grouping."""
    return f"{currency}{value:.2f}"


@dataclass
class Suggestion:
    """Move part of a workload to a cheaper provider."""

    alternative: str
    alternative_name: str
    eligible_ratio: float
    savings: float
    note: str = ""


@dataclass
class ProjectEntry:
    """One project line of the report (plus its detail lines)."""

    name: str
    provider: str
    provider_name: str
    missing_provider: bool = False
    spend: float = 0.0
    projected: float = 0.0
    projected_usage: float = 0.0
    daily_rate: float = 0.0
    unit: str = "call"
    source: str = "unknown"
    has_recent_window: bool = False
    budget: float | None = None
    suggestion: Suggestion | None = None

    @property
    def budget_ratio(self) -> float | None:
        if not self.budget:
            return None
        return self.spend / self.budget

    @property
    def budget_alert(self) -> bool:
        ratio = self.budget_ratio
        return ratio is not None and ratio >= ALERT_RATIO


@dataclass
class ProviderTotals:
    name: str
    cost: float = 0.0
    projected: float = 0.0
    monthly_budget: float | None = None

    @property
    def budget_alert(self) -> bool:
        return bool(self.monthly_budget) and self.cost / self.monthly_budget >= ALERT_RATIO


@dataclass
class CostReport:
    """Everything computed in one tracker run."""

    as_of: date
    currency: str = "$"
    projects: list[ProjectEntry] = field(default_factory=list)
    providers: dict[str, ProviderTotals] = field(default_factory=dict)
    total_cost: float = 0.0
    projected_total: float = 0.0
    overall_budget: float | None = None

    @property
    def overall_alert(self) -> bool:
        return bool(self.overall_budget) and self.total_cost / self.overall_budget >= ALERT_RATIO

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable view, used by ``--json``."""
        return {
            "as_of": self.as_of.isoformat(),
            "currency": self.currency,
            "projects": [
                {**asdict(p), "budget_alert": p.budget_alert} for p in self.projects
            ],
            "providers": {
                key: {**asdict(t), "budget_alert": t.budget_alert}
                for key, t in self.providers.items()
            },
            "total_cost": round(self.total_cost, 6),
            "projected_total": round(self.projected_total, 6),
            "overall_budget": self.overall_budget,
            "overall_alert": self.overall_alert,
        }


class ReportRenderer:
    """Formats a CostReport as plain text."""

    def __init__(self, report: CostReport) -> None:
        self.report = report

    def _money(self, value: float) -> str:
        return format_currency(self.report.currency, value)

    def render(self) -> str:
        month = calendar.month_name[self.report.as_of.month]
        lines = [f"API Cost Tracker — {month}", ""]

        for entry in self.report.projects:
            lines.extend(self._project_lines(entry))
            lines.append("")

        lines.append("Provider overview:")
        for totals in self.report.providers.values():
            budget_note = (
                f" of {self._money(totals.monthly_budget)} budget" if totals.monthly_budget else ""
            )
            alert = " ⚠️" if totals.budget_alert else ""
            lines.append(
                f"- {totals.name}: {self._money(totals.cost)} spent{budget_note}, "
                f"projected {self._money(totals.projected)}{alert}"
            )

        lines.append("")
        if self.report.overall_budget:
            alert = " ⚠️" if self.report.overall_alert else ""
            lines.append(
                f"Total month-to-date: {self._money(self.report.total_cost)} of "
                f"{self._money(self.report.overall_budget)} budget{alert}"
            )
        else:
            lines.append(f"Total month-to-date: {self._money(self.report.total_cost)}")
        lines.append(f"Projected month-end spend: {self._money(self.report.projected_total)}")

        return "\n".join(lines)

    def _project_lines(self, entry: ProjectEntry) -> list[str]:
        if entry.missing_provider:
            return [f'{entry.name} — Provider "{entry.provider}" is missing from config.']

        budget_note = f" | Budget: {self._money(entry.budget)}" if entry.budget else ""
        lines = [
            f"{entry.name} ({entry.provider_name}) — {self._money(entry.spend)} spent, "
            f"projected {self._money(entry.projected)}{budget_note}"
        ]

        if entry.has_recent_window:
            unit_label = "calls" if entry.unit == "call" else "tokens"
            lines.append(
                f"  Recent pace: {entry.daily_rate:.1f} {unit_label}/day · Pricing via {entry.source}"
            )

        if entry.budget_alert:
            lines.append(
                f"  ⚠️ Project budget alert: {entry.budget_ratio * 100:.1f}% of monthly allocation used"
            )

        if entry.suggestion:
            s = entry.suggestion
            lines.append(
                f"  💡 {s.eligible_ratio * 100:.0f}% of this workload could move to "
                f"{s.alternative_name} to save ~{self._money(s.savings)} this month ({s.note})."
            )

        return lines
