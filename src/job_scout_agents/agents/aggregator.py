"""Export agent: writes enriched listings to Excel (and optionally CSV)."""

from __future__ import annotations

import time
from datetime import UTC, datetime
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from job_scout_agents.agents.base import BaseAgent
from job_scout_core.exceptions import ExportError

if TYPE_CHECKING:
    from job_scout_core.models.listing import EnrichedListing
    from job_scout_core.state import RunState

logger = structlog.get_logger()

EXPORT_COLUMNS = [
    "Title",
    "Company",
    "Location",
    "EasyApply",
    "JobLink",
    "CompanyLink",
    "Outcome",
    "Message",
]
SCORE_COLUMNS = ["Match %", "Eligible", "Matched Skills"]

_LINK_COLUMNS = ("JobLink", "CompanyLink")


def export_basename(now: datetime | None = None) -> str:
    """File stem for a run's export, one per calendar day."""
    stamp = (now or datetime.now(UTC)).strftime("%Y-%m-%d")
    return f"linkedin_jobs_{stamp}"


def build_row(listing: EnrichedListing, include_score: bool = False) -> dict[str, object]:
    """Flatten one enriched listing into an export row."""
    row: dict[str, object] = {
        "Title": listing.title,
        "Company": listing.company,
        "Location": listing.location,
        "EasyApply": "Easy Apply" if listing.easy_apply_badge else "N/A",
        "JobLink": listing.listing_url,
        "CompanyLink": listing.apply_outcome.url or "N/A",
        "Outcome": listing.apply_outcome.kind,
        "Message": listing.apply_outcome.message,
    }
    if include_score:
        result = listing.eligibility
        row["Match %"] = round(result.match_percentage, 1) if result else None
        row["Eligible"] = result.is_eligible if result else None
        row["Matched Skills"] = " | ".join(result.matched_skills) if result else ""
    return row


class ExportAgent(BaseAgent):
    """Generate the run's spreadsheet from every enriched listing."""

    agent_name = "export"

    async def run(self, state: RunState) -> RunState:
        """Write output files and record their paths on the state."""
        self._log_start({"enriched": len(state.enriched)})
        start = time.monotonic()

        output_dir = self.settings.output_dir
        include_score = state.config.score_listings
        rows = [build_row(e, include_score) for e in state.enriched]
        columns = EXPORT_COLUMNS + (SCORE_COLUMNS if include_score else [])
        stem = export_basename()

        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            if "xlsx" in state.config.output_formats:
                xlsx_path = output_dir / f"{stem}.xlsx"
                self._write_excel(rows, columns, xlsx_path, state)
                state.output_files.append(str(xlsx_path))
            if "csv" in state.config.output_formats:
                csv_path = output_dir / f"{stem}.csv"
                self._write_csv(rows, columns, csv_path)
                state.output_files.append(str(csv_path))
        except OSError as e:
            msg = f"Failed to write export to {output_dir}: {e}"
            raise ExportError(msg) from e

        self._log_end(time.monotonic() - start, {"output_files": state.output_files})
        return state

    def _write_csv(self, rows: list[dict[str, object]], columns: list[str], path: Path) -> None:
        """Write rows to a CSV file."""
        import pandas as pd

        pd.DataFrame(rows, columns=columns).to_csv(path, index=False)
        logger.info("csv_written", path=str(path), rows=len(rows))

    def _write_excel(
        self,
        rows: list[dict[str, object]],
        columns: list[str],
        path: Path,
        state: RunState,
    ) -> None:
        """Write the Jobs sheet with hyperlinks plus a Run Summary sheet."""
        import pandas as pd
        from openpyxl import load_workbook
        from openpyxl.styles import Font, PatternFill

        df = pd.DataFrame(rows, columns=columns)
        df.to_excel(str(path), index=False, sheet_name="Jobs")

        wb = load_workbook(str(path))
        ws = wb["Jobs"]

        link_font = Font(color="0563C1", underline="single")
        for name in _LINK_COLUMNS:
            col = columns.index(name) + 1
            for row_idx in range(2, ws.max_row + 1):
                cell = ws.cell(row=row_idx, column=col)
                if isinstance(cell.value, str) and cell.value.startswith("http"):
                    cell.hyperlink = cell.value
                    cell.font = link_font

        green = PatternFill(start_color="C6EFCE", fill_type="solid")
        outcome_col = columns.index("Outcome") + 1
        for row_idx in range(2, ws.max_row + 1):
            if ws.cell(row=row_idx, column=outcome_col).value == "success":
                ws.cell(row=row_idx, column=outcome_col).fill = green

        counts = state.outcome_counts()
        summary_ws = wb.create_sheet("Run Summary")
        summary_data = [
            ("Run ID", state.config.run_id),
            ("Keywords", state.config.search.keywords),
            ("Location", state.config.search.location),
            ("Total Results", state.total_results),
            ("Pages Scanned", state.pages_scanned),
            ("Listings Found", len(state.listings)),
            ("External URLs Captured", counts["success"]),
            ("Easy Apply", counts["easy_apply"]),
            ("Apply Button Not Found", counts["not_found"]),
            ("Errors", counts["error"]),
            ("Step Errors", len(state.errors)),
        ]
        for i, (key, value) in enumerate(summary_data, start=1):
            summary_ws.cell(row=i, column=1, value=key)
            summary_ws.cell(row=i, column=2, value=str(value))

        wb.save(str(path))
        logger.info("excel_written", path=str(path), rows=len(rows))
