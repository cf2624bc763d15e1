"""Export services package."""

from cashflow.services.export.base import (
    ExportData,
    ExportError,
    default_export_filename,
)
from cashflow.services.export.excel import build_frames, export_excel
from cashflow.services.export.pdf import export_pdf

__all__ = [
    "ExportData",
    "ExportError",
    "build_frames",
    "default_export_filename",
    "export_excel",
    "export_pdf",
]
