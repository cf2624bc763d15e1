"""
PDF export: a printable report rendered page by page with Pillow.

The first page carries the summary figures; each collection then starts
on a new page as a table, continuing onto further pages as needed.
"""

from pathlib import Path
from typing import Optional, Union

from PIL import Image, ImageDraw, ImageFont

from cashflow.services.export.base import ExportData, ExportError, MISSING
from cashflow.utils.currency import format_currency

# A4 at 100 dpi
PAGE_SIZE = (827, 1169)
MARGIN = 60
LINE_HEIGHT = 20
CHAR_WIDTH = 7


def _amount(value) -> str:
    return MISSING if value is None else format_currency(value, show_symbol=False)


def _sections(data: ExportData) -> list[tuple[str, list[tuple[str, int]], list[list[str]]]]:
    """(title, [(header, width_in_chars)], rows) per collection."""
    return [
        (
            "Incomes",
            [("Date", 12), ("Name", 34), ("Category", 20), ("Frequency", 12), ("Amount", 14)],
            [
                [i.date.isoformat(), i.name, i.category, i.frequency.value, _amount(i.amount)]
                for i in sorted(data.incomes, key=lambda i: i.date)
            ],
        ),
        (
            "Spendings",
            [("Date", 12), ("Name", 34), ("Category", 20), ("Kind", 18), ("Amount", 14)],
            [
                [s.date.isoformat(), s.name, s.category, s.kind.value, _amount(s.amount)]
                for s in sorted(data.spendings, key=lambda s: s.date)
            ],
        ),
        (
            "Obligations",
            [("Name", 30), ("Type", 14), ("Monthly", 13), ("Balance", 14), ("Months", 10), ("Status", 10)],
            [
                [
                    o.name,
                    o.type.value,
                    _amount(o.amount),
                    _amount(o.balance),
                    (
                        f"{o.paid_months or 0}/{o.total_months}"
                        if o.total_months else MISSING
                    ),
                    o.status.value,
                ]
                for o in data.obligations
            ],
        ),
        (
            "Assets",
            [("Name", 34), ("Type", 14), ("Quantity", 14), ("Unit", 10), ("Purchase Price", 16)],
            [
                [a.name, a.type.value, f"{a.quantity.normalize():f}", a.unit or MISSING, _amount(a.purchase_price)]
                for a in data.assets
            ],
        ),
    ]


class _PdfRenderer:
    """Lays out lines top to bottom, starting a new page when one fills up."""

    def __init__(self):
        self.font = ImageFont.load_default()
        self.pages: list[Image.Image] = []
        self._draw: Optional[ImageDraw.ImageDraw] = None
        self._y = 0

    def _text(self, text: str) -> str:
        # The bitmap fallback font only covers latin-1
        if not isinstance(self.font, ImageFont.FreeTypeFont):
            return text.encode("latin-1", "replace").decode("latin-1")
        return text

    def new_page(self) -> None:
        page = Image.new("RGB", PAGE_SIZE, "white")
        self.pages.append(page)
        self._draw = ImageDraw.Draw(page)
        self._y = MARGIN

    def line(self, text: str = "", indent: int = 0) -> None:
        if self._draw is None or self._y + LINE_HEIGHT > PAGE_SIZE[1] - MARGIN:
            self.new_page()
        self._draw.text((MARGIN + indent, self._y), self._text(text), fill="black", font=self.font)
        self._y += LINE_HEIGHT

    def row(self, cells: list[str], widths: list[int]) -> None:
        if self._draw is None or self._y + LINE_HEIGHT > PAGE_SIZE[1] - MARGIN:
            self.new_page()
        x = MARGIN
        for cell, width in zip(cells, widths):
            text = cell if len(cell) < width else cell[: width - 4] + "..."
            self._draw.text((x, self._y), self._text(text), fill="black", font=self.font)
            x += width * CHAR_WIDTH
        self._y += LINE_HEIGHT

    def rule(self) -> None:
        if self._draw is None:
            self.new_page()
        self._draw.line(
            [(MARGIN, self._y - 4), (PAGE_SIZE[0] - MARGIN, self._y - 4)],
            fill="gray",
        )


def export_pdf(
    data: ExportData,
    path: Union[str, Path],
    summary: Optional[dict[str, str]] = None,
    title: str = "Financial Report",
) -> Path:
    """
    Render and write the report.

    Args:
        data: Records to list
        path: Output file
        summary: Label -> formatted figure, shown on the first page

    Raises:
        ExportError: If the file can't be written
    """
    renderer = _PdfRenderer()
    renderer.new_page()
    renderer.line(title)
    renderer.rule()
    renderer.line()
    for label, value in (summary or {}).items():
        renderer.line(f"{label}: {value}", indent=10)

    for section_title, columns, rows in _sections(data):
        renderer.new_page()
        renderer.line(f"{section_title} ({len(rows)})")
        renderer.rule()
        headers = [name for name, _ in columns]
        widths = [width for _, width in columns]
        renderer.row(headers, widths)
        if not rows:
            renderer.line("No records", indent=10)
        for cells in rows:
            renderer.row(cells, widths)

    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        first, *rest = renderer.pages
        first.save(path, "PDF", resolution=100.0, save_all=True, append_images=rest)
    except (OSError, ValueError) as e:
        raise ExportError(f"Failed to write PDF export: {e}")
    return path
