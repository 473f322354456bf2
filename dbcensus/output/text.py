"""Plain text output rendering."""
from typing import Sequence

from dbcensus.core.describe import TableDescription
from dbcensus.core.report import RowCountReport
from dbcensus.models.schema import SchemaTableInfo

def render_report_text(report: RowCountReport) -> str:
    """Render a row-count report, one line per table followed by the total."""
    lines = [f"{report.num_tables} tables found"]

    for entry in report.tables:
        if entry.error is not None:
            lines.append(
                f"schema: {entry.schema_name} | table: {entry.table_name} | error: {entry.error}"
            )
        else:
            lines.append(
                f"schema: {entry.schema_name} | table: {entry.table_name} | "
                f"num-of-rows: {entry.num_rows}"
            )

    lines.append(f"A total of {report.total_rows} rows in {report.num_tables} tables")
    if report.failed_tables:
        lines.append(f"{len(report.failed_tables)} tables could not be counted")

    return "\n".join(lines)


def render_tables_text(tables: Sequence[SchemaTableInfo]) -> str:
    """Render table names as SCHEMA.TABLE, one per line."""
    return "\n".join(t.qualified_name for t in tables)


def render_table_description_text(description: TableDescription) -> str:
    """Render columns and constraints of a table."""
    lines = [
        f"Table: {description.schema_name}.{description.table_name}",
        "",
        "| Column | Type | Nullable |",
        "|--------|------|----------|",
    ]
    for col in description.columns:
        lines.append(f"| {col.name} | {col.data_type} | {'Yes' if col.is_nullable else 'No'} |")

    lines.append("")
    if description.constraints:
        lines.append("Constraints:")
        for constraint in description.constraints:
            lines.append(f"- {constraint.name} ({constraint.ctype.value})")
    else:
        lines.append("No constraints.")

    return "\n".join(lines)
