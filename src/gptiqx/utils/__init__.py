"""Utility modules for GPTIQX."""

from .data_prep import export_to_json, export_to_csv, prepare_export

__all__ = [
    "export_to_json",
    "export_to_csv",
    "prepare_export",
]
