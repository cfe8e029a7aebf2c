"""Core (UI-agnostic) culture-survey dashboard logic.

This package contains:
- workbook loading (XLSX -> grid -> records)
- schema inference and completion status
- aggregate compute functions (dataclasses / JSON-serializable payloads)
- quadrant classification and batch validation
- chart helpers (Altair -> Vega-Lite spec dict)
"""
