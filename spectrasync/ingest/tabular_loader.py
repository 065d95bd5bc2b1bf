"""Tabular (CSV/TXT/Excel) absorbance ingestion with header sniffing."""

from __future__ import annotations

import hashlib
import io
import logging
import re
import unicodedata
from collections.abc import Iterable
from pathlib import PurePath

import numpy as np
import pandas as pd

from spectrasync.models import Sample, Spectrum

_LOGGER = logging.getLogger(__name__)

TEXT_SUFFIXES = (".csv", ".txt", ".dat", ".tsv")
EXCEL_SUFFIXES = (".xlsx", ".xls")
EXCEL_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}

_WAVE_EXACT = {"wavelength", "wavelengths", "lambda", "nm", "wl"}
_ABS_EXACT = {"absorption", "absorbance", "abs", "a", "od"}


class SampleIngestError(RuntimeError):
    pass


def _clean_header(column: object) -> str:
    text = unicodedata.normalize("NFKC", str(column)).strip()
    text = "".join(ch for ch in text if unicodedata.category(ch) != "Cf")
    return text.lower()


def _header_stem(column: str) -> str:
    """Header without a trailing unit, e.g. ``wavelength (nm)`` -> ``wavelength``."""

    return re.sub(r"[\s_]*[\(\[].*?[\)\]]\s*$", "", column).strip()


def _find_column(
    columns: Iterable[object], fragment: str, exact: set[str], exclude: object | None = None
) -> object | None:
    for column in columns:
        if column == exclude:
            continue
        cleaned = _clean_header(column)
        if fragment in cleaned or _header_stem(cleaned) in exact:
            return column
    return None


def _numeric_columns(df: pd.DataFrame) -> list[object]:
    numeric: list[object] = []
    for column in df.columns:
        converted = pd.to_numeric(df[column], errors="coerce")
        if int(converted.notna().sum()) > 0:
            numeric.append(column)
    return numeric


def _is_numeric_token(token: object) -> bool:
    try:
        float(str(token).strip())
    except ValueError:
        return False
    return True


def _first_row_is_numeric(raw: pd.DataFrame) -> bool:
    """True when the first raw row is data, i.e. the file has no header line."""

    if raw.empty or len(raw.columns) < 2:
        return False
    return all(_is_numeric_token(value) for value in raw.iloc[0])


def _read_table(file_bytes: bytes, suffix: str, header: int | None) -> pd.DataFrame:
    if suffix in EXCEL_SUFFIXES:
        return pd.read_excel(
            io.BytesIO(file_bytes), sheet_name=0, header=header, engine=EXCEL_ENGINES[suffix]
        )
    text = file_bytes.decode("utf-8-sig", errors="replace")
    return pd.read_csv(io.StringIO(text), comment="#", sep=None, engine="python", header=header)


def _read_frame(file_bytes: bytes, suffix: str) -> pd.DataFrame:
    try:
        raw = _read_table(file_bytes, suffix, header=None)
        df = raw if _first_row_is_numeric(raw) else _read_table(file_bytes, suffix, header=0)
    except Exception as exc:
        raise SampleIngestError(f"Could not parse file: {exc}") from exc
    df.columns = [str(column) for column in df.columns]
    return df.dropna(how="all")


def _resolve_columns(df: pd.DataFrame) -> tuple[object, object, str]:
    wave_column = _find_column(df.columns, "wave", _WAVE_EXACT)
    abs_column = _find_column(df.columns, "abs", _ABS_EXACT, exclude=wave_column)
    if wave_column is not None and abs_column is not None:
        return wave_column, abs_column, "headers"
    numeric = _numeric_columns(df)
    if wave_column is None and abs_column is None:
        if len(numeric) < 2:
            raise SampleIngestError("No wavelength/absorbance columns detected")
        return numeric[0], numeric[1], "numeric_fallback"
    known = wave_column if wave_column is not None else abs_column
    remaining = [column for column in numeric if column != known]
    if not remaining:
        raise SampleIngestError("Only one numeric column detected")
    if wave_column is None:
        return remaining[0], abs_column, "numeric_fallback"
    return wave_column, remaining[0], "numeric_fallback"


def frame_to_spectrum(df: pd.DataFrame, wave_column: object, abs_column: object) -> Spectrum:
    """Numeric, sorted, de-duplicated spectrum from two frame columns."""

    wavelength = pd.to_numeric(df[wave_column], errors="coerce").to_numpy(dtype=float)
    absorption = pd.to_numeric(df[abs_column], errors="coerce").to_numpy(dtype=float)
    mask = np.isfinite(wavelength) & np.isfinite(absorption)
    dropped = int(mask.size - mask.sum())
    if dropped:
        _LOGGER.info("Dropped %d non-numeric rows", dropped)
    wavelength = wavelength[mask]
    absorption = absorption[mask]
    order = np.argsort(wavelength, kind="stable")
    wavelength = wavelength[order]
    absorption = absorption[order]
    unique_wavelengths, first_index = np.unique(wavelength, return_index=True)
    if unique_wavelengths.size != wavelength.size:
        _LOGGER.info(
            "Collapsed %d duplicate wavelengths", wavelength.size - unique_wavelengths.size
        )
    return Spectrum(wavelengths_nm=unique_wavelengths, absorption=absorption[first_index])


def content_id(file_bytes: bytes) -> str:
    """Short content hash used as the sample id of an upload."""

    return hashlib.sha256(file_bytes).hexdigest()[:12]


def sample_name(filename: str) -> str:
    name = PurePath(filename).name
    stem = name.split(".")[0]
    return stem or name or "sample"


def load_sample(
    file_bytes: bytes,
    filename: str,
    *,
    sample_id: str | None = None,
    color: str | None = None,
) -> Sample:
    """Parse an uploaded spectrum file into a :class:`Sample`."""

    if not file_bytes:
        raise SampleIngestError(f"{filename}: empty file provided")
    suffix = PurePath(filename).suffix.lower()
    if suffix not in TEXT_SUFFIXES + EXCEL_SUFFIXES:
        raise SampleIngestError(f"{filename}: unsupported file type {suffix or '(none)'}")

    df = _read_frame(file_bytes, suffix)
    if df.empty:
        raise SampleIngestError(f"{filename}: no rows detected")
    wave_column, abs_column, method = _resolve_columns(df)
    _LOGGER.debug(
        "%s: wavelength=%r absorbance=%r via %s", filename, wave_column, abs_column, method
    )
    spectrum = frame_to_spectrum(df, wave_column, abs_column)
    if spectrum.is_empty:
        raise SampleIngestError(f"{filename}: no numeric wavelength/absorbance rows")

    identifier = sample_id or content_id(file_bytes)
    return Sample(sample_id=identifier, name=sample_name(filename), spectrum=spectrum, color=color)


__all__ = [
    "EXCEL_ENGINES",
    "EXCEL_SUFFIXES",
    "SampleIngestError",
    "TEXT_SUFFIXES",
    "content_id",
    "frame_to_spectrum",
    "load_sample",
    "sample_name",
]
