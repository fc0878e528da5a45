"""Technical Implementation deck - canonical 9-slide schema definition.

Walks through the Activity KPI Dashboard build: database restore on Cloud
SQL, SQL data preparation, the Power BI star schema, DAX measures, report
navigation, refresh filtering and QA/handoff.

Slide dimensions: 13.333" x 7.5" (16:9 wide). Full-width elements are
derived from the theme's canvas width; everything else uses fixed
coordinates in inches.
"""

from . import references as ref
from .elements import (
    bullets,
    callout,
    code_panel,
    connector,
    entity,
    flow_steps,
    image_card,
    label,
    panel,
    snippet,
)
from .models import (
    DeckSchema,
    DeckTheme,
    EntityStyle,
    FlowStep,
    SlideSchema,
    SlideType,
)

OUTPUT_FILENAME = "Technical_Implementation.pptx"

# Image asset keys
IMG_YTD = "ytd"
IMG_DEFINED = "defined"
IMG_CUSTOM = "custom"


# ---------------------------------------------------------------------------
# Slide 0: Title
# ---------------------------------------------------------------------------
def _slide_title() -> SlideSchema:
    return SlideSchema(
        index=0,
        name="title",
        title="Technical Implementation",
        subtitle="SQL Server (Cloud SQL) + Power BI • Activity KPI Dashboard",
        slide_type=SlideType.TITLE,
        sources=[
            ref.relabel(ref.DATE_TABLES,
                        "Date-table/time-intelligence guidance (Power BI)"),
            ref.DATESBETWEEN,
        ],
    )


# ---------------------------------------------------------------------------
# Slide 1: System overview
# ---------------------------------------------------------------------------
def _slide_system_overview(width: float) -> SlideSchema:
    return SlideSchema(
        index=1,
        name="system_overview",
        title="System overview",
        subtitle="High-level data flow and modeling approach",
        elements=[
            flow_steps("data_flow", 0.85, 1.25, 3.55, 1.05, 0.45, [
                FlowStep("1) Restore DB",
                         "Import .bak into SQL Server\n"
                         "(Cloud SQL for SQL Server)",
                         accent="blue"),
                FlowStep("2) Prepare dataset",
                         "Shift dates to 2025/2026\n"
                         "Rebuild Dim_Time_day (2025–2026)",
                         accent="teal"),
                FlowStep("3) Power BI model",
                         "Star schema\nDAX measures A/B/C\n3 report pages",
                         accent="navy"),
            ]),
            panel("star_schema", 0.85, 2.75, width - 1.7, 4.35,
                  "Power BI star schema"),
            entity("fact_activities", 5.3, 3.45, 2.75, 1.05,
                   "v_Fact_Activities_Shifted",
                   "• ind_id\n• activity_date\n• act_value",
                   EntityStyle.FACT),
            entity("dim_indicator", 2.0, 3.25, 2.4, 0.9,
                   "Dim_Indicator", "ind_id, ind_desc…",
                   EntityStyle.DIMENSION),
            entity("dim_time_day", 2.0, 4.35, 2.4, 0.9,
                   "Dim_Time_day", "day_date, week_id…",
                   EntityStyle.DIMENSION),
            connector("indicator_to_fact", 4.45, 3.7, 0.85, 0.0),
            connector("time_to_fact", 4.45, 4.8, 0.85, -0.8),
            bullets("implementation_notes", 1.1, 5.55, 3.9,
                    "Implementation notes", [
                        "Date table is marked in Power BI to enable "
                        "time-intelligence patterns.",
                        "AsOfDate anchored to the latest FACT date "
                        "(prevents empty future dates).",
                        "All KPIs are filtered by selected Indicator "
                        "(Dim_Indicator).",
                    ], h=1.75),
        ],
        sources=[ref.DATE_TABLES, ref.DATE_TABLE_GUIDANCE],
    )


# ---------------------------------------------------------------------------
# Slide 2: Database restore
# ---------------------------------------------------------------------------
def _slide_restore(width: float) -> SlideSchema:
    return SlideSchema(
        index=2,
        name="database_restore",
        title="Database restore (Cloud SQL for SQL Server)",
        subtitle="Import .bak into the SQL Server instance",
        elements=[
            callout("restore_steps", 0.85, 1.25, 6.2, 2.05, "Restore steps",
                    "1) Upload the .bak file to Cloud Storage\n"
                    "2) Import/restore into Cloud SQL (SQL Server)\n"
                    "3) Verify database and user credentials\n"
                    "4) Confirm connectivity from Power BI "
                    "(public IP or proxy)"),
            code_panel("example_cli", 7.35, 1.25, 5.15, 2.05, [
                snippet("gcloud sql import bak INSTANCE \\\n"
                        "  gs://BUCKET/backup.bak \\\n"
                        "  --database=DB_NAME",
                        7.6, 1.8, 4.8, 1.4, label="Example CLI"),
            ]),
            callout("why_it_matters", 0.85, 3.55, width - 1.7, 3.65,
                    "Why this matters",
                    "The restored database is the single source used by "
                    "Power BI. The remaining steps (date shifting, date "
                    "dimension rebuild, measures) are layered on top without "
                    "changing the original backup tables."),
        ],
        sources=[ref.CLOUD_SQL_BAK, ref.GCLOUD_IMPORT_BAK],
    )


# ---------------------------------------------------------------------------
# Slide 3: Data preparation (SQL)
# ---------------------------------------------------------------------------
def _slide_data_preparation() -> SlideSchema:
    return SlideSchema(
        index=3,
        name="data_preparation",
        title="Data preparation (SQL)",
        subtitle="Shift dates to 2025/2026 and rebuild the date dimension",
        elements=[
            bullets("key_changes", 0.85, 1.15, 6.0, "Key changes", [
                "Create a view (v_Fact_Activities_Shifted) that moves "
                "activity_date forward by +4 years (2021→2025, 2022→2026).",
                "Cast act_value to INT (defaults invalid values to 0).",
                "Rebuild Dim_Time_day for a full daily calendar "
                "(2025-01-01 → 2026-12-31) with ISO week_id and LY/LW "
                "helper dates.",
            ]),
            code_panel("sql_snippets", 7.05, 1.15, 5.43, 5.75, [
                snippet("DATEADD(year, 4, CONVERT(date,\n"
                        "  TRY_CONVERT(datetimeoffset(0), activity_date)))\n"
                        "AS activity_date",
                        7.3, 1.7, 5.0, 1.2, label="Snippet (shift view)"),
                snippet("CONCAT(\n"
                        "  YEAR(DATEADD(day,3, DATETRUNC(iso_week, d))),\n"
                        "  RIGHT('00'+CAST(DATEPART(iso_week,d) "
                        "AS varchar(2)),2)\n"
                        ") AS week_id",
                        7.3, 3.48, 5.05, 1.55, label="Snippet (ISO week_id)",
                        size_pt=11.2),
            ]),
            callout("outcome", 0.85, 5.95, 6.0, 1.0, "Outcome",
                    "Power BI can treat the dataset as “current/previous "
                    "year” and compute YTD/LY and rolling windows using a "
                    "complete date dimension."),
        ],
        sources=[ref.relabel(
            ref.DATE_TABLES,
            "Time-intelligence patterns rely on a proper date table")],
    )


# ---------------------------------------------------------------------------
# Slide 4: Power BI model
# ---------------------------------------------------------------------------
def _slide_power_bi_model() -> SlideSchema:
    return SlideSchema(
        index=4,
        name="power_bi_model",
        title="Power BI model",
        subtitle="Tables loaded, relationships, and refresh",
        elements=[
            callout("imported_tables", 0.85, 1.25, 6.25, 2.35,
                    "Imported tables",
                    "• dbo.v_Fact_Activities_Shifted\n"
                    "• dbo.Dim_Indicator\n"
                    "• dbo.Dim_Time_day\n\n"
                    "Optional: Dim_Employees for future slicing "
                    "(not required for KPIs)."),
            callout("relationships", 0.85, 3.85, 6.25, 3.05,
                    "Relationships + settings",
                    "• Fact[ind_id] → Dim_Indicator[ind_id]\n"
                    "• Fact[activity_date] → Dim_Time_day[day_date]\n"
                    "• Mark Dim_Time_day as the Date table\n"
                    "• Use AsOfDate = max fact date to avoid empty future "
                    "periods"),
            label("report_pages", 7.35, 1.25, 5.15, 0.3,
                  "Report pages (examples)"),
            image_card("ytd_page", IMG_YTD, 7.35, 1.6, 5.15, 1.85, "YTD"),
            image_card("defined_page", IMG_DEFINED, 7.35, 3.55, 5.15, 1.85,
                       "Defined period (365/180)"),
            image_card("custom_page", IMG_CUSTOM, 7.35, 5.5, 5.15, 1.85,
                       "Custom period comparison"),
        ],
        sources=[ref.DATE_TABLES, ref.DATE_TABLE_GUIDANCE],
    )


# ---------------------------------------------------------------------------
# Slide 5: KPI calculations (DAX)
# ---------------------------------------------------------------------------
def _slide_kpi_calculations() -> SlideSchema:
    return SlideSchema(
        index=5,
        name="kpi_calculations",
        title="KPI calculations (DAX)",
        subtitle="Measures for A) YTD, B) rolling windows, C) custom periods",
        elements=[
            bullets("core_measures", 0.85, 1.15, 6.2, "Core measures", [
                "Activities = SUM(Fact[act_value])",
                "AsOfDate = MAX(Fact[activity_date]) with filters removed",
                "All comparisons are scoped to the selected Indicator "
                "(Dim_Indicator).",
            ]),
            callout("abc_logic", 0.85, 3.35, 6.2, 3.55, "A/B/C logic summary",
                    "A) YTD: Jan 1 → AsOfDate; LY = same window 12 months "
                    "earlier\n"
                    "B) Defined: Last N days (365/180) → AsOfDate; LY = same "
                    "shifted window\n"
                    "C) Custom: Period1 vs Period2 defined by slicers; trend "
                    "shows both periods\n\n"
                    "Variance % = (Current − LY) / LY; arrow ▲/▼ based on "
                    "sign"),
            code_panel("dax_pattern", 7.35, 1.15, 5.15, 5.75, [
                snippet("m_YTD =\n"
                        "VAR d = [AsOfDate]\n"
                        "VAR s = DATE(YEAR(d),1,1)\n"
                        "RETURN CALCULATE([Activities],\n"
                        "  DATESBETWEEN(Dim_Time_day[day_date], s, d))",
                        7.6, 1.7, 4.85, 2.2, label="Example pattern",
                        size_pt=11.2),
                snippet("m_VarPct =\n"
                        "VAR cur=[Current]\n"
                        "VAR ly=[LY]\n"
                        "RETURN DIVIDE(cur-ly, ly)",
                        7.6, 4.1, 4.85, 1.25, size_pt=11.2),
            ]),
        ],
        sources=[ref.DATESBETWEEN, ref.TIME_INTELLIGENCE],
    )


# ---------------------------------------------------------------------------
# Slide 6: Report UX
# ---------------------------------------------------------------------------
def _slide_report_ux() -> SlideSchema:
    return SlideSchema(
        index=6,
        name="report_ux",
        title="Report UX",
        subtitle="Three pages (YTD / Defined / Custom) or single-page tabs "
                 "via bookmarks",
        elements=[
            callout("navigation_options", 0.85, 1.25, 6.2, 2.2,
                    "Navigation options",
                    "Option 1 (simple): Three report pages\n"
                    "• YTD page\n• Defined Period page\n• Custom Period page\n\n"
                    "Option 2 (tabbed): One page + bookmark navigator\n"
                    "• Group visuals by tab (Selection pane)\n"
                    "• Create bookmarks per tab\n"
                    "• Use Bookmark navigator buttons"),
            bullets("slicer_behavior", 0.85, 3.75, 6.2, "Slicer behavior", [
                "Keep Indicator slicer global (applies across tabs/pages).",
                "For bookmark tabs, disable “Data” for bookmarks to prevent "
                "slicer resets.",
                "Trend charts use a trend measure that returns BLANK outside "
                "the selected window.",
            ]),
            image_card("defined_example", IMG_DEFINED, 7.35, 1.25, 5.15, 5.9,
                       "Example: Defined period page"),
        ],
        sources=[ref.BOOKMARKS, ref.NAVIGATORS],
    )


# ---------------------------------------------------------------------------
# Slide 7: Refresh & "today" filtering
# ---------------------------------------------------------------------------
def _slide_refresh_filtering() -> SlideSchema:
    return SlideSchema(
        index=7,
        name="refresh_filtering",
        title="Refresh & “today” filtering",
        subtitle="Optional Power Query filter to restrict dataset to today",
        elements=[
            callout("why_filter", 0.85, 1.25, 6.2, 1.85,
                    "Why filter to today?",
                    "When the date dimension extends beyond available fact "
                    "data, visuals may show empty future dates. Filtering to "
                    "today (or using AsOfDate based on fact max) keeps KPIs "
                    "aligned with the “current” reporting cut."),
            code_panel("power_query", 0.85, 3.35, 6.2, 3.85, [
                snippet("TodayUTC = Date.From(DateTimeZone.UtcNow()),\n"
                        "FilteredToToday = Table.SelectRows(\n"
                        "  #\"Changed Type\", each [activity_date] <= "
                        "TodayUTC)",
                        1.1, 3.9, 5.9, 1.4, label="Power Query (M) example",
                        size_pt=11.6),
            ]),
            callout("recommended_approach", 7.35, 1.25, 5.15, 5.95,
                    "Recommended approach used in this project",
                    "• AsOfDate is based on the latest fact date, so KPIs do "
                    "not depend on the end of the date table.\n"
                    "• Optional M filter ensures refresh only includes data "
                    "up to today (UTC) when required."),
        ],
        sources=[ref.relabel(ref.DATE_TABLES,
                             "Date table settings (Power BI)")],
    )


# ---------------------------------------------------------------------------
# Slide 8: QA, validation & handoff
# ---------------------------------------------------------------------------
def _slide_qa_handoff() -> SlideSchema:
    return SlideSchema(
        index=8,
        name="qa_handoff",
        title="QA, validation & handoff",
        subtitle="How results were checked and what is delivered",
        elements=[
            callout("validation_checks", 0.85, 1.25, 6.2, 2.4,
                    "Validation checks",
                    "• SQL spot-check: SUM(act_value) for an indicator over a "
                    "known date window\n"
                    "• Power BI cards match SQL results for the same window\n"
                    "• Relationships verified (Fact→Date, Fact→Indicator)\n"
                    "• Edge cases: LY = 0 handled with DIVIDE() to avoid "
                    "errors"),
            callout("handoff_package", 0.85, 4.0, 6.2, 2.95,
                    "Handoff package (GitHub)",
                    "• SQL scripts (shift view + rebuild date dimension)\n"
                    "• Power BI file (PBIX)\n"
                    "• Two decks: Technical + Business\n"
                    "• README with setup steps and troubleshooting"),
            panel("deliverables", 7.35, 1.25, 5.15, 5.7, "Deliverables", [
                "Activity-KPI-Dashboard.pbix",
                "Technical_Implementation.pptx",
                "Business_KPIs.pptx",
                "SQL scripts + README",
            ]),
        ],
        sources=[ref.relabel(ref.TIME_INTELLIGENCE,
                             "DAX time-intelligence overview")],
    )


# ---------------------------------------------------------------------------
# Public builder
# ---------------------------------------------------------------------------
def build_technical_deck_schema(theme: DeckTheme | None = None) -> DeckSchema:
    """Build the 9-slide Technical Implementation deck schema."""
    theme = theme or DeckTheme()
    width = theme.width_inches
    return DeckSchema(
        name="Technical Implementation",
        deck_type="technical",
        theme=theme,
        output_filename=OUTPUT_FILENAME,
        slides=[
            _slide_title(),
            _slide_system_overview(width),
            _slide_restore(width),
            _slide_data_preparation(),
            _slide_power_bi_model(),
            _slide_kpi_calculations(),
            _slide_report_ux(),
            _slide_refresh_filtering(),
            _slide_qa_handoff(),
        ],
    )
