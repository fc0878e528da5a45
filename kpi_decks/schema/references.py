"""Documentation references cited in the speaker notes of both decks."""

from .models import Source

DATE_TABLES = Source(
    "Mark as date table (Power BI)",
    "https://learn.microsoft.com/en-us/power-bi/transform-model/desktop-date-tables",
)
DATE_TABLE_GUIDANCE = Source(
    "Date table modeling guidance",
    "https://learn.microsoft.com/en-us/power-bi/guidance/model-date-tables",
)
DATESBETWEEN = Source(
    "DATESBETWEEN (DAX)",
    "https://learn.microsoft.com/en-us/dax/datesbetween-function-dax",
)
TIME_INTELLIGENCE = Source(
    "DAX time intelligence functions",
    "https://learn.microsoft.com/en-us/dax/time-intelligence-functions-dax",
)
BOOKMARKS = Source(
    "Bookmarks in Power BI",
    "https://learn.microsoft.com/en-us/power-bi/create-reports/desktop-bookmarks",
)
NAVIGATORS = Source(
    "Page & bookmark navigators",
    "https://learn.microsoft.com/en-us/power-bi/create-reports/button-navigators",
)
CLOUD_SQL_BAK = Source(
    "Cloud SQL for SQL Server import/export with BAK",
    "https://docs.cloud.google.com/sql/docs/sqlserver/import-export/import-export-bak",
)
GCLOUD_IMPORT_BAK = Source(
    "gcloud sql import bak reference",
    "https://docs.cloud.google.com/sdk/gcloud/reference/sql/import/bak",
)


def relabel(source: Source, label: str) -> Source:
    """Same URL, different wording in the notes."""
    return Source(label=label, url=source.url)
