from __future__ import annotations

import hashlib
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from spectrasync.ingest.tabular_loader import (
    SampleIngestError,
    content_id,
    frame_to_spectrum,
    load_sample,
    sample_name,
)


def test_load_csv_with_headers() -> None:
    payload = b"wavelength,absorbance\n200,0.10\n200.5,0.12\n201,0.15\n"

    sample = load_sample(payload, "river_a.csv")

    assert sample.name == "river_a"
    assert sample.sample_id == hashlib.sha256(payload).hexdigest()[:12]
    np.testing.assert_array_equal(sample.spectrum.wavelengths_nm, [200.0, 200.5, 201.0])
    np.testing.assert_array_equal(sample.spectrum.absorption, [0.10, 0.12, 0.15])
    assert sample.color is None


def test_load_headerless_numeric_text() -> None:
    payload = b"200,0.1\n201,0.2\n202,0.3\n"

    sample = load_sample(payload, "plain.txt")

    assert len(sample.spectrum) == 3
    assert sample.spectrum.wave_range_nm == (200.0, 202.0)


def test_load_tab_separated_with_short_headers() -> None:
    payload = b"lambda\tOD\n210\t0.4\n211\t0.5\n"

    sample = load_sample(payload, "lake.tsv", sample_id="lake", color="#000000")

    assert sample.sample_id == "lake"
    assert sample.color == "#000000"
    np.testing.assert_array_equal(sample.spectrum.absorption, [0.4, 0.5])


def test_rows_are_sorted_and_duplicates_keep_first() -> None:
    payload = b"wavelength,absorbance\n202,0.3\n200,0.1\n200,0.9\n201,0.2\n"

    sample = load_sample(payload, "dupes.csv")

    np.testing.assert_array_equal(sample.spectrum.wavelengths_nm, [200.0, 201.0, 202.0])
    np.testing.assert_array_equal(sample.spectrum.absorption, [0.1, 0.2, 0.3])


def test_non_numeric_rows_are_dropped() -> None:
    payload = b"wavelength,absorbance\n200,0.1\nn/a,0.5\n201,bad\n202,0.3\n"

    sample = load_sample(payload, "noisy.csv")

    np.testing.assert_array_equal(sample.spectrum.wavelengths_nm, [200.0, 202.0])


def test_load_excel_workbook(tmp_path: Path) -> None:
    path = tmp_path / "well.xlsx"
    pd.DataFrame({"Wavelength": [220.0, 221.0], "Absorbance": [0.7, 0.6]}).to_excel(
        path, index=False
    )

    sample = load_sample(path.read_bytes(), path.name)

    assert sample.name == "well"
    np.testing.assert_array_equal(sample.spectrum.absorption, [0.7, 0.6])


def test_empty_payload_is_rejected() -> None:
    with pytest.raises(SampleIngestError):
        load_sample(b"", "empty.csv")


def test_unsupported_suffix_is_rejected() -> None:
    with pytest.raises(SampleIngestError):
        load_sample(b"{}", "sample.json")


def test_single_numeric_column_is_rejected() -> None:
    with pytest.raises(SampleIngestError):
        load_sample(b"wavelength,notes\n200,x\n201,y\n", "single.csv")


def test_sample_name_uses_text_before_first_dot() -> None:
    assert sample_name("Tap.Water.2024.csv") == "Tap"
    assert sample_name("folder/spring.txt") == "spring"


def test_frame_to_spectrum_coerces_strings() -> None:
    frame = pd.DataFrame({"w": ["201", "200"], "a": ["0.2", "0.1"]})

    spectrum = frame_to_spectrum(frame, "w", "a")

    np.testing.assert_array_equal(spectrum.wavelengths_nm, [200.0, 201.0])
    np.testing.assert_array_equal(spectrum.absorption, [0.1, 0.2])


def test_headerless_file_with_repeated_first_row_values() -> None:
    payload = b"0.5,0.5\n201,0.2\n202,0.3\n"

    sample = load_sample(payload, "repeat.csv")

    np.testing.assert_array_equal(sample.spectrum.wavelengths_nm, [0.5, 201.0, 202.0])
    np.testing.assert_array_equal(sample.spectrum.absorption, [0.5, 0.2, 0.3])


@pytest.mark.parametrize(
    ("filename", "engine"), [("legacy.xls", "xlrd"), ("modern.xlsx", "openpyxl")]
)
def test_excel_engine_follows_suffix(monkeypatch, filename: str, engine: str) -> None:
    engines: list[str] = []

    def fake_read_excel(buffer, sheet_name=0, header=0, engine=None):
        engines.append(engine)
        return pd.DataFrame([[200.0, 0.4], [201.0, 0.5]])

    monkeypatch.setattr(pd, "read_excel", fake_read_excel)

    sample = load_sample(b"workbook-bytes", filename)

    assert engines == [engine]
    np.testing.assert_array_equal(sample.spectrum.absorption, [0.4, 0.5])


def test_content_id_matches_default_sample_id() -> None:
    payload = b"wavelength,absorbance\n200,0.1\n201,0.2\n"

    assert load_sample(payload, "a.csv").sample_id == content_id(payload)
