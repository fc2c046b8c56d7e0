"""Notifier agent: emails the report of captured external URLs."""

from __future__ import annotations

import time
from html import escape
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

from job_scout_agents.agents.base import BaseAgent
from job_scout_agents.tools.factories import create_email_sender

if TYPE_CHECKING:
    from job_scout_core.models.listing import EnrichedListing
    from job_scout_core.state import RunState

logger = structlog.get_logger()

REPORT_SUBJECT = "LinkedIn Job Report"


def build_report_html(captures: list[EnrichedListing]) -> str:
    """HTML table of listings whose apply flow reached an external site."""
    rows = "".join(
        "<tr>"
        f"<td>{escape(c.title)}</td>"
        f"<td>{escape(c.company)}</td>"
        f"<td>{escape(c.location)}</td>"
        f'<td><a href="{escape(c.apply_outcome.url or "#")}" target="_blank">'
        f"{escape(c.apply_outcome.url or 'N/A')}</a></td>"
        "</tr>"
        for c in captures
    )
    return (
        "<h2>Job Application Report</h2>"
        f"<h3>Successfully Scraped Jobs ({len(captures)})</h3>"
        '<table border="1" style="border-collapse: collapse; width: 100%;">'
        '<thead><tr style="background-color: #f2f2f2;">'
        '<th style="padding: 8px;">Title</th>'
        '<th style="padding: 8px;">Company</th>'
        '<th style="padding: 8px;">Location</th>'
        '<th style="padding: 8px;">Company Site</th>'
        "</tr></thead>"
        f"<tbody>{rows}</tbody>"
        "</table>"
    )


def build_report_text(captures: list[EnrichedListing]) -> str:
    """Plain-text alternative of the report."""
    lines = [f"Successfully Scraped Jobs ({len(captures)})", ""]
    for c in captures:
        lines.append(f"- {c.title} | {c.company} | {c.location} | {c.apply_outcome.url}")
    return "\n".join(lines)


class NotifierAgent(BaseAgent):
    """Email the capture report; failures are recorded, never fatal."""

    agent_name = "notifier"

    async def run(self, state: RunState) -> RunState:
        """Send the report unless this is a dry run or nothing was captured."""
        captures = state.successful_captures
        self._log_start({"captures": len(captures)})
        start = time.monotonic()
        email_sent = False

        if state.config.dry_run:
            logger.info("email_skipped", reason="dry_run")
        elif not captures:
            logger.info("email_skipped", reason="no_captures")
        else:
            recipient = self.settings.report_recipient or self.settings.smtp_user
            try:
                sender = create_email_sender(self.settings)
                email_sent = await sender.send(
                    to_email=recipient,
                    subject=REPORT_SUBJECT,
                    html_body=build_report_html(captures),
                    text_body=build_report_text(captures),
                    attachments=[Path(f) for f in state.output_files],
                )
            except Exception as e:
                self._record_error(state, e)

        state.email_sent = email_sent
        self._log_end(time.monotonic() - start, {"email_sent": email_sent})
        return state
