"""Business KPIs & Insights deck - canonical 6-slide schema definition.

Stakeholder-facing companion to the technical deck: what the dashboard
answers, how the KPIs are defined, the defined-period and custom-period
views, and the business impact.
"""

from . import references as ref
from .elements import banner, bullets, callout, image_card
from .models import DeckSchema, DeckTheme, SlideSchema, SlideType
from .technical_deck import IMG_CUSTOM, IMG_DEFINED, IMG_YTD

OUTPUT_FILENAME = "Business_KPIs.pptx"


def _slide_title() -> SlideSchema:
    return SlideSchema(
        index=0,
        name="title",
        title="Business KPIs & Insights",
        subtitle="How to read the dashboard and what it enables for "
                 "decision-making",
        slide_type=SlideType.TITLE,
        sources=[
            ref.relabel(ref.DATE_TABLES,
                        "Date-table/time-intelligence guidance (Power BI)"),
            ref.DATESBETWEEN,
        ],
    )


def _slide_dashboard_answers() -> SlideSchema:
    return SlideSchema(
        index=1,
        name="dashboard_answers",
        title="What this dashboard answers",
        subtitle="One place to track activity volume by Indicator, compare "
                 "periods, and spot trend changes",
        elements=[
            callout("primary_questions", 0.85, 1.25, 6.1, 2.55,
                    "Primary questions",
                    "• Are we up or down vs last year for the same period?\n"
                    "• Is the change driven by specific activity Indicators "
                    "(email, meetings, etc.)?\n"
                    "• Are there spikes/drops that require operational "
                    "follow-up?\n"
                    "• How do two business-defined periods compare (custom "
                    "Period1 vs Period2)?"),
            callout("workflow", 0.85, 4.05, 6.1, 3.1,
                    "How to use (workflow)",
                    "1) Select Indicator (single-select)\n"
                    "2) Choose the analysis mode: YTD, Defined (365/180), or "
                    "Custom\n"
                    "3) Read the KPI cards (Current, LY, % change)\n"
                    "4) Use the trend chart to interpret timing and "
                    "volatility"),
            image_card("ytd_example", IMG_YTD, 7.35, 1.25, 5.15, 5.9,
                       "Example: YTD page"),
        ],
        sources=[ref.relabel(
            ref.DATE_TABLES,
            "Date table/time intelligence patterns in Power BI")],
    )


def _slide_kpi_definitions(width: float) -> SlideSchema:
    return SlideSchema(
        index=2,
        name="kpi_definitions",
        title="KPI definitions",
        subtitle="What YTD / LY / rolling windows / custom periods mean",
        elements=[
            callout("definitions", 0.85, 1.25, width - 1.7, 1.75,
                    "Definitions (as-of Jan 20, 2026)",
                    "• YTD: Jan 1, 2026 → AsOfDate (latest loaded date with "
                    "activity)\n"
                    "• YTD LY: Jan 1, 2025 → same day-of-year cut (12 months "
                    "earlier)\n"
                    "• Last 365/180: trailing window ending at AsOfDate; LY = "
                    "same shifted window\n"
                    "• Custom periods: user-selected Period1 vs Period2 "
                    "ranges\n"
                    "• % variance: (Current − Comparison) / Comparison\n"
                    "• Arrow: ▲ when % ≥ 0, ▼ when % < 0"),
            callout("interpretation_tips", 0.85, 3.25, 6.1, 3.95,
                    "Interpretation tips",
                    "• Large % swings on small LY values can be noisy—use the "
                    "trend line to confirm.\n"
                    "• Look for sustained changes (multi-week) vs single-day "
                    "spikes.\n"
                    "• Use Defined Period mode for short-term operational "
                    "monitoring."),
            callout("what_counts", 7.35, 3.25, 5.15, 3.95,
                    "What counts as “activity”",
                    "The fact table stores an Indicator ID and an activity "
                    "count/value per date. Indicator metadata "
                    "(category/subcategory) enables slicing and consistent "
                    "reporting across activity types."),
        ],
        sources=[ref.DATESBETWEEN, ref.TIME_INTELLIGENCE],
    )


def _slide_defined_period(width: float) -> SlideSchema:
    return SlideSchema(
        index=3,
        name="defined_period",
        title="Defined period (Last 365 / 180 days)",
        subtitle="Operational monitoring with consistent windows",
        elements=[
            image_card("defined_view", IMG_DEFINED, 0.85, 1.25, width - 1.7,
                       5.95, "Defined Period view (example screenshot)"),
            banner("question", 0.95, 6.9, width - 1.9, 0.45,
                   "Use this view to answer: “Are we trending up/down over "
                   "the last N days, and how does it compare to last year’s "
                   "same period?”"),
        ],
        sources=[ref.relabel(ref.NAVIGATORS,
                             "Bookmarks & navigation (optional)")],
    )


def _slide_custom_periods(width: float) -> SlideSchema:
    return SlideSchema(
        index=4,
        name="custom_periods",
        title="Custom periods (Period 1 vs Period 2)",
        subtitle="Compare any two business-defined windows",
        elements=[
            image_card("custom_view", IMG_CUSTOM, 0.85, 1.25, width - 1.7,
                       5.95, "Custom Period view (example screenshot)"),
            callout("typical_uses", 0.85, 6.55, width - 1.7, 0.85,
                    "Typical uses",
                    "Compare pre/post policy changes, campaigns, org changes, "
                    "holidays, or project milestones by selecting two date "
                    "ranges and evaluating both value and trend."),
        ],
        sources=[ref.relabel(ref.DATE_TABLE_GUIDANCE,
                             "Date table/time intelligence patterns")],
    )


def _slide_impact_next_steps() -> SlideSchema:
    return SlideSchema(
        index=5,
        name="impact_next_steps",
        title="Business impact & next steps",
        subtitle="How this dashboard supports decision-making",
        elements=[
            bullets("business_impact", 0.85, 1.2, 6.25, "Business impact", [
                "Single source for activity KPIs across Indicators with "
                "consistent comparisons.",
                "Faster trend detection: spikes/drops are visible immediately "
                "in the trend charts.",
                "Supports operational planning (resource allocation, workload "
                "patterns) using rolling windows.",
                "Supports business review cycles via custom period comparison "
                "(Period1 vs Period2).",
            ]),
            bullets("enhancements", 0.85, 3.95, 6.25,
                    "Suggested enhancements (optional)", [
                        "Add drill-through to employee/department "
                        "(Dim_Employees) when needed.",
                        "Add indicator category rollups and a “Top movers” "
                        "view.",
                        "Add anomaly flags (simple z-score) to highlight "
                        "outlier days.",
                        "Publish to Power BI Service + scheduled refresh "
                        "(gateway/proxy as required).",
                    ]),
            callout("stakeholders_receive", 7.35, 1.2, 5.15, 5.7,
                    "What stakeholders receive",
                    "• A self-serve dashboard with three analysis modes\n"
                    "• Clear definitions of KPIs (YTD, LY, rolling, custom)\n"
                    "• Visual trend context to interpret changes\n"
                    "• A technical README + scripts for reproducibility"),
        ],
        sources=[
            ref.relabel(ref.BOOKMARKS, "Power BI bookmarks (for tabbed UX)"),
            ref.relabel(ref.NAVIGATORS, "Power BI navigators"),
        ],
    )


def build_business_deck_schema(theme: DeckTheme | None = None) -> DeckSchema:
    """Build the 6-slide Business KPIs & Insights deck schema."""
    theme = theme or DeckTheme()
    width = theme.width_inches
    return DeckSchema(
        name="Business KPIs & Insights",
        deck_type="business",
        theme=theme,
        output_filename=OUTPUT_FILENAME,
        slides=[
            _slide_title(),
            _slide_dashboard_answers(),
            _slide_kpi_definitions(width),
            _slide_defined_period(width),
            _slide_custom_periods(width),
            _slide_impact_next_steps(),
        ],
    )
