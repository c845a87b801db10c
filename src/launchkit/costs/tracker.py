"""
API cost tracker — month-to-date spend and month-end projections.

For each project: spend so far at the provider's resolved price, a daily
rate (from the last 7 days when available, else the month-to-date average),
the projected month-end cost, budget alerts and optimization suggestions.
"""

import calendar
from dataclasses import dataclass
from datetime import date

import structlog

from ..config.schema import Project, TrackerConfig, Usage
from .prices import UNIT_1K_TOKENS, UNIT_CALL, UNKNOWN_PRICING, ResolvedPricing
from .report import CostReport, ProjectEntry, ProviderTotals, Suggestion

logger = structlog.get_logger()

RECENT_WINDOW_DAYS = 7


@dataclass
class RecentWindow:
    """Usage observed over the last ``days`` days."""

    value: float
    days: int = RECENT_WINDOW_DAYS


def compute_cost(usage: Usage, pricing: ResolvedPricing) -> float:
    """Cost of ``usage`` at ``pricing``.

    ``1k_tokens`` bills tokens per thousand, ``call`` bills calls; any other
    unit costs nothing. Missing counters count as zero.
    """
    if pricing.unit == UNIT_1K_TOKENS:
        return ((usage.tokens or 0) / 1000) * pricing.price
    if pricing.unit == UNIT_CALL:
        return (usage.calls or 0) * pricing.price
    return 0.0


def usage_for_unit(amount: float, unit: str) -> Usage:
    """Wrap a usage amount in the counter a unit bills on."""
    if unit == UNIT_CALL:
        return Usage(calls=amount)
    return Usage(tokens=amount)


def build_recent_window(entry: Usage | None, unit: str) -> RecentWindow | None:
    """Pick the recent-window signal for ``unit``.

    Tokens for ``1k_tokens``, calls otherwise. When that counter is absent
    the other one is used as-is, so a calls count can end up labelled as
    tokens (kept for compatibility with existing configs).
    """
    if entry is None:
        return None

    if unit == UNIT_1K_TOKENS:
        primary, secondary = entry.tokens, entry.calls
    else:
        primary, secondary = entry.calls, entry.tokens

    if primary is not None:
        return RecentWindow(value=primary)
    if secondary is not None:
        return RecentWindow(value=secondary)
    return None


def days_in_month(today: date) -> int:
    return calendar.monthrange(today.year, today.month)[1]


def daily_projection(
    amount_to_date: float,
    recent_window: RecentWindow | None = None,
    today: date | None = None,
) -> float:
    """Daily usage rate.

    A non-empty recent window wins; otherwise the month-to-date amount is
    spread over the days elapsed so far.
    """
    if recent_window and recent_window.days > 0 and recent_window.value > 0:
        return recent_window.value / recent_window.days

    day_of_month = (today or date.today()).day
    if not amount_to_date or day_of_month <= 0:
        return 0.0
    return amount_to_date / day_of_month


class CostTracker:
    """Builds a CostReport from the tracker config and resolved prices.

    Invariant: build_report() never raises for a validated config; projects
    pointing at unknown providers become warning entries and stay out of
    every total.
    """

    def __init__(
        self,
        config: TrackerConfig,
        pricing: dict[str, ResolvedPricing],
        today: date | None = None,
    ) -> None:
        self.config = config
        self.pricing = pricing
        self.today = today or date.today()
        self._log = logger.bind(component="cost_tracker")

    def build_report(self) -> CostReport:
        report = CostReport(
            as_of=self.today,
            currency=self.config.currency or "$",
            overall_budget=self.config.overall_monthly_budget,
        )

        for project in self.config.projects:
            entry = self.project_entry(project)
            report.projects.append(entry)
            if entry.missing_provider:
                continue

            report.total_cost += entry.spend
            report.projected_total += entry.projected

            provider = self.config.providers[project.provider]
            totals = report.providers.setdefault(
                project.provider,
                ProviderTotals(
                    name=provider.display_name or project.provider,
                    monthly_budget=provider.monthly_budget,
                ),
            )
            totals.cost += entry.spend
            totals.projected += entry.projected

        self._log.info(
            "cost_tracker.report_built",
            projects=len(report.projects),
            total_cost=round(report.total_cost, 6),
            projected_total=round(report.projected_total, 6),
        )
        return report

    def project_entry(self, project: Project) -> ProjectEntry:
        provider = self.config.providers.get(project.provider)
        if provider is None:
            self._log.warning(
                "cost_tracker.missing_provider",
                project=project.name,
                provider=project.provider,
            )
            return ProjectEntry(
                name=project.name,
                provider=project.provider,
                provider_name=project.provider,
                missing_provider=True,
            )

        pricing = self.pricing.get(project.provider, UNKNOWN_PRICING)
        usage = project.month_to_date
        window = build_recent_window(project.recent_7_days, pricing.unit)
        if pricing.unit == UNIT_1K_TOKENS:
            usage_value = usage.tokens or 0
        else:
            usage_value = usage.calls or 0

        spend = compute_cost(usage, pricing)
        daily_rate = daily_projection(usage_value, window, self.today)
        projected_usage = daily_rate * days_in_month(self.today)
        projected = compute_cost(usage_for_unit(projected_usage, pricing.unit), pricing)

        return ProjectEntry(
            name=project.name,
            provider=project.provider,
            provider_name=provider.display_name or project.provider,
            spend=spend,
            projected=projected,
            projected_usage=projected_usage,
            daily_rate=daily_rate,
            unit=pricing.unit,
            source=pricing.source,
            has_recent_window=window is not None,
            budget=project.threshold.monthly_budget if project.threshold else None,
            suggestion=self._suggest(project.provider, projected_usage, pricing),
        )

    def _suggest(
        self,
        provider_key: str,
        projected_usage: float,
        pricing: ResolvedPricing,
    ) -> Suggestion | None:
        optimization = self.config.providers[provider_key].optimization
        if not optimization or not optimization.alternative:
            return None

        alternative = self.config.providers.get(optimization.alternative)
        alt_pricing = self.pricing.get(optimization.alternative)
        if alternative is None or alt_pricing is None or not alt_pricing.price:
            return None

        ratio = optimization.eligible_usage_ratio or 0.0
        eligible_usage = projected_usage * ratio
        current_cost = compute_cost(usage_for_unit(eligible_usage, pricing.unit), pricing)
        alt_cost = compute_cost(usage_for_unit(eligible_usage, alt_pricing.unit), alt_pricing)
        savings = max(0.0, current_cost - alt_cost)
        if savings <= 0:
            return None

        return Suggestion(
            alternative=optimization.alternative,
            alternative_name=alternative.display_name or optimization.alternative,
            eligible_ratio=ratio,
            savings=savings,
            note=optimization.note or "",
        )
