#!/usr/bin/env python3
"""Headless UI contract verification."""

from __future__ import annotations

import sys

from app.ui.main import get_ui_contract
from spectrasync.settings import load_settings, load_version

EXPECTED_TABS = ["Spectra", "Similarity"]
EXPECTED_SIDEBAR = ["Wavelength Range", "Normalization Method", "Spectral Smoothing"]


def main() -> int:
    contract = get_ui_contract()
    if contract.tabs != EXPECTED_TABS:
        print(f"Tab contract mismatch: {contract.tabs} != {EXPECTED_TABS}")
        return 1
    if contract.sidebar_sections != EXPECTED_SIDEBAR:
        print("Sidebar contract mismatch")
        return 1
    if not load_version().app_version:
        print("Version badge missing app_version")
        return 1
    try:
        load_settings()
    except ValueError as exc:
        print(f"Invalid analysis settings: {exc}")
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
