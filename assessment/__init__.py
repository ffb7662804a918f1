"""Core (UI-agnostic) assessment logic.

This package contains:
- workbook decoding (XLSX -> pandas -> raw grids / header-keyed rows)
- sheet and column alias resolution
- roster parsing and per-domain normalization into a canonical record set
- per-participant table/chart view models (Altair -> Vega-Lite spec dict)
- report composition (HTML)
"""
