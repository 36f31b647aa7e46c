"""Timeline Visualizer - draws rendered geometry as a standalone HTML page.

Responsible for:
- Multi-day Gantt page (day header, weekend/today/holiday columns, shift bars)
- Hourly page (hour header, work bars, live "now" line)
- Employee rows sized to their lane count
- Client-side header/body scroll sync and indicator ticking
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Any, Iterable, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from crew_timeline.models import EmployeeRecord, PositionedItem, TaskStatus
from crew_timeline.services.session import TimelineSession
from crew_timeline.services.time_indicator import compute_now_offset_px
from crew_timeline.utils.time_utils import format_date


class TimelineVisualizer:
    """Generates HTML timeline pages from a TimelineSession."""

    # Bar colors by task status
    STATUS_COLORS = {
        TaskStatus.PENDING: "#9E9E9E",      # Grey
        TaskStatus.IN_PROGRESS: "#2196F3",  # Blue
        TaskStatus.COMPLETED: "#4CAF50",    # Green
        TaskStatus.OVERDUE: "#F44336",      # Red
        TaskStatus.ON_HOLD: "#FF9800",      # Orange
        TaskStatus.CANCELLED: "#607D8B",    # Blue grey
        TaskStatus.NO_SHOW: "#9C27B0",      # Purple
    }

    TEMPLATE_NAME = "timeline.html"

    def __init__(self, template_dir: Optional[str] = None):
        """Initialize the visualizer.

        Args:
            template_dir: Directory holding timeline.html
                (default: the package's templates directory)
        """
        directory = Path(template_dir) if template_dir else Path(__file__).parent.parent / "templates"
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(directory)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def generate_timeline(
        self,
        session: TimelineSession,
        employees: Iterable[EmployeeRecord],
        output_path: str | Path,
        reference_now: datetime,
    ) -> Path:
        """Render the session's current geometry and write it to output_path.

        Args:
            session: Session whose positioned items are drawn
            employees: Employee rows, in display order
            output_path: Where to write the HTML file
            reference_now: Time used for today highlighting and the now line

        Returns:
            Path to the written file
        """
        html_content = self.render_html(session, employees, reference_now)
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(html_content)
        return path

    def render_html(
        self,
        session: TimelineSession,
        employees: Iterable[EmployeeRecord],
        reference_now: datetime,
    ) -> str:
        """Render the page to a string; the viewport mode picks the layout."""
        timeline_data = self._prepare_timeline_data(session, list(employees), reference_now)
        template = self.jinja_env.get_template(self.TEMPLATE_NAME)
        return template.render(
            **timeline_data,
            timeline_json=json.dumps(timeline_data["client"]),
        )

    def _prepare_timeline_data(
        self,
        session: TimelineSession,
        employees: list[EmployeeRecord],
        reference_now: datetime,
    ) -> dict[str, Any]:
        """Collect rows, columns and bars for the template."""
        renderer = session.renderer
        settings = renderer.settings
        viewport = session.viewport
        hourly = viewport.is_hourly

        if hourly:
            columns = [
                {"left_px": c.left_px, "width_px": c.width_px, "label": c.label, "classes": ""}
                for c in renderer.hour_columns()
            ]
            bars = renderer.work_bars(session.work_windows, viewport.visible_start_date)
            time_off_bars = []
            timeline_width = settings.get_day_width_total()
            now_offset = compute_now_offset_px(
                reference_now, viewport.visible_start_date, settings.hour_width_px
            )
        else:
            columns = [
                {
                    "left_px": c.left_px,
                    "width_px": c.width_px,
                    "label": f"{c.weekday} {c.display_date}",
                    "title": c.holiday or "",
                    "classes": " ".join(
                        name for name, on in (
                            ("weekend", c.is_weekend),
                            ("today", c.is_today),
                            ("holiday", c.holiday is not None),
                        ) if on
                    ),
                }
                for c in renderer.day_columns(viewport, reference_now)
            ]
            bars = renderer.shift_bars(session.work_windows, viewport)
            time_off_bars = renderer.time_off_bars(session.time_off, viewport)
            timeline_width = renderer.timeline_width(viewport)
            now_offset = None

        rows = self._prepare_rows(
            session.positioned, employees, bars, time_off_bars, renderer
        )

        title_range = format_date(viewport.visible_start_date)
        if viewport.visible_end_date != viewport.visible_start_date:
            title_range += f" to {format_date(viewport.visible_end_date)}"

        return {
            "title": f"{'Hourly' if hourly else 'Schedule'}: {title_range}",
            "mode": "hourly" if hourly else "daily",
            "columns": columns,
            "rows": rows,
            "timeline_width": timeline_width,
            "name_column_px": settings.name_column_px,
            "now_offset": now_offset,
            "client": {
                "mode": "hourly" if hourly else "daily",
                "viewedDate": format_date(viewport.visible_start_date),
                "hourWidth": settings.hour_width_px,
                "intervalMs": int(settings.indicator_interval_seconds * 1000),
            },
        }

    def _prepare_rows(
        self,
        positioned: list[PositionedItem],
        employees: list[EmployeeRecord],
        bars: list,
        time_off_bars: list,
        renderer,
    ) -> list[dict]:
        """One row per employee, plus rows for owners without a record."""
        names = {e.id: e for e in employees}
        order = [e.id for e in employees]
        for p in positioned:
            if p.item.owner_id not in names and p.item.owner_id not in order:
                order.append(p.item.owner_id)

        heights = renderer.row_heights(positioned)
        rows = []
        for owner_id in order:
            employee = names.get(owner_id)
            rows.append({
                "owner_id": owner_id,
                "name": employee.name if employee else owner_id,
                "initials": employee.initials if employee else owner_id[:2].upper(),
                "role": employee.role if employee else None,
                "height": heights.get(owner_id, renderer.row_height(0)),
                "items": [
                    self._prepare_item(p)
                    for p in positioned
                    if p.item.owner_id == owner_id
                ],
                "bars": [
                    {"left_px": b.left_px, "width_px": b.width_px, "label": b.label}
                    for b in bars
                    if b.window.owner_id == owner_id
                ],
                "time_off": [
                    {"left_px": b.left_px, "width_px": b.width_px, "label": b.label}
                    for b in time_off_bars
                    if b.period.owner_id == owner_id
                ],
            })
        return rows

    def _prepare_item(self, positioned: PositionedItem) -> dict:
        """Template data for one bar."""
        data = positioned.to_dict()
        data["color"] = self.STATUS_COLORS.get(positioned.item.status, "#9E9E9E")
        if positioned.item.is_hourly:
            data["time_label"] = positioned.item.range.label()
        else:
            data["time_label"] = (
                f"{format_date(positioned.item.range.start_date)} - "
                f"{format_date(positioned.item.range.end_date)}"
            )
        return data
