from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

import httpx

from door_catalog import DOOR_MODELS, OptionCatalog, empty_catalog

logger = logging.getLogger(__name__)

COL_MODEL = "Door Model"
COL_SIZE = "Size"
COL_GLASS = "Glass Options"
COL_JAMB = "Jamb Sizes"
COL_HINGE = "Hinge Finish"
COL_SILL = "Sill Finish"
COL_HANDLE_PREP = "Handle Prep"
COL_SWING = "Swing"

REFERENCE_COLUMNS: Tuple[str, ...] = (
    COL_MODEL,
    COL_SIZE,
    COL_GLASS,
    COL_JAMB,
    COL_HINGE,
    COL_SILL,
    COL_HANDLE_PREP,
    COL_SWING,
)

# Catalog attribute <- reference column, for the lists built independently of model grouping.
_FLAT_COLUMNS: Tuple[Tuple[str, str], ...] = (
    ("glass_options", COL_GLASS),
    ("jamb_sizes", COL_JAMB),
    ("hinge_finishes", COL_HINGE),
    ("sill_finishes", COL_SILL),
    ("handle_preps", COL_HANDLE_PREP),
    ("swings", COL_SWING),
)

RawRow = Mapping[str, object]


class ReferenceDataError(ValueError):
    pass


class CatalogLoadStatus(str, Enum):
    PENDING = "PENDING"
    READY = "READY"
    FAILED = "FAILED"


@dataclass(frozen=True)
class CatalogLoad:
    status: CatalogLoadStatus
    catalog: OptionCatalog
    source: str
    error: Optional[str] = None

    @property
    def is_settled(self) -> bool:
        # Both outcomes unblock the order form; FAILED simply carries the empty catalog.
        return self.status in (CatalogLoadStatus.READY, CatalogLoadStatus.FAILED)

    @classmethod
    def pending(cls, source: str) -> "CatalogLoad":
        return cls(status=CatalogLoadStatus.PENDING, catalog=empty_catalog(), source=source)


def _cell(row: RawRow, column: str) -> str:
    """
    Trimmed cell text; anything that is not a string (missing column, None) reads as blank.
    """
    value = row.get(column)
    if not isinstance(value, str):
        return ""
    return value.strip()


def filter_reference_rows(rows: Iterable[RawRow]) -> List[RawRow]:
    """
    Keep only rows that carry a model name or a size.

    Rows with neither are dropped before the catalog is built, which also drops any
    option values that sit alone on such a row.
    """
    return [row for row in rows if _cell(row, COL_MODEL) or _cell(row, COL_SIZE)]


def build_option_catalog(rows: Sequence[RawRow]) -> OptionCatalog:
    """
    Normalize reference rows into an OptionCatalog.

    Rows are processed exactly as given (callers filter with `filter_reference_rows` first):
    - A non-blank "Door Model" cell opens (or re-opens) that model's size group.
    - A non-blank "Size" cell is appended to the open group; sizes before any model are dropped.
    - Each option column feeds its own catalog-wide list, regardless of grouping.
    Every list keeps first-seen order and never holds blanks or duplicates.
    """
    sizes_by_model: Dict[str, List[str]] = {}
    current_model: Optional[str] = None

    flat_values: Dict[str, List[str]] = {attr: [] for attr, _ in _FLAT_COLUMNS}
    flat_seen: Dict[str, set] = {attr: set() for attr, _ in _FLAT_COLUMNS}

    for row in rows:
        model = _cell(row, COL_MODEL)
        if model:
            current_model = model
            sizes_by_model.setdefault(current_model, [])

        size = _cell(row, COL_SIZE)
        if size and current_model is not None:
            group = sizes_by_model[current_model]
            if size not in group:
                group.append(size)

        for attr, column in _FLAT_COLUMNS:
            value = _cell(row, column)
            if value and value not in flat_seen[attr]:
                flat_seen[attr].add(value)
                flat_values[attr].append(value)

    return OptionCatalog(
        models=DOOR_MODELS,
        sizes_by_model=MappingProxyType({m: tuple(sizes) for m, sizes in sizes_by_model.items()}),
        glass_options=tuple(flat_values["glass_options"]),
        jamb_sizes=tuple(flat_values["jamb_sizes"]),
        hinge_finishes=tuple(flat_values["hinge_finishes"]),
        sill_finishes=tuple(flat_values["sill_finishes"]),
        handle_preps=tuple(flat_values["handle_preps"]),
        swings=tuple(flat_values["swings"]),
    )


def _is_url(source: str) -> bool:
    lowered = source.strip().lower()
    return lowered.startswith("http://") or lowered.startswith("https://")


def _read_source_text(source: str, *, timeout_s: float) -> str:
    if _is_url(source):
        try:
            resp = httpx.get(source, timeout=timeout_s, follow_redirects=True)
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ReferenceDataError(f"Could not fetch reference data from {source}: {exc}") from exc
        return resp.text

    path = Path(source)
    try:
        # utf-8-sig: spreadsheet exports often start with a BOM, which would corrupt the first header.
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise ReferenceDataError(f"Could not read reference data file {path}: {exc}") from exc


def parse_reference_csv(text: str) -> List[Dict[str, object]]:
    """
    Parse CSV text with a required header row into row dicts keyed by header name.
    """
    reader = csv.DictReader(io.StringIO(text))
    try:
        rows = [dict(row) for row in reader]
    except csv.Error as exc:
        raise ReferenceDataError(f"Malformed reference CSV: {exc}") from exc
    if not reader.fieldnames:
        raise ReferenceDataError("Reference CSV has no header row")

    missing = [c for c in REFERENCE_COLUMNS if c not in reader.fieldnames]
    if missing:
        # Missing columns just read as blank cells.
        logger.warning("Reference CSV is missing columns: %s", ", ".join(missing))
    return rows


def read_reference_rows(source: str, *, timeout_s: float = 10.0) -> List[Dict[str, object]]:
    """
    Read raw reference rows from a CSV file path or an http(s) URL.

    Raises ReferenceDataError when the source cannot be read or parsed.
    """
    if not isinstance(source, str) or not source.strip():
        raise ReferenceDataError("No reference data source configured")
    return parse_reference_csv(_read_source_text(source.strip(), timeout_s=timeout_s))


def load_option_catalog(source: str, *, timeout_s: float = 10.0) -> CatalogLoad:
    """
    One-shot startup load: read, filter, and normalize the reference data.

    Never raises for source problems. An unreadable source is logged and yields a FAILED
    load carrying the empty catalog, so the order form still opens (with empty selectors).
    No retry is attempted.
    """
    try:
        raw_rows = read_reference_rows(source, timeout_s=timeout_s)
    except ReferenceDataError as exc:
        logger.warning("Reference data load failed; continuing with an empty catalog: %s", exc)
        return CatalogLoad(
            status=CatalogLoadStatus.FAILED,
            catalog=empty_catalog(),
            source=str(source),
            error=str(exc),
        )

    rows = filter_reference_rows(raw_rows)
    catalog = build_option_catalog(rows)
    logger.info(
        "Loaded door catalog from %s: %d of %d rows used, %d models with sizes",
        source,
        len(rows),
        len(raw_rows),
        len(catalog.sizes_by_model),
    )
    unknown = sorted(m for m in catalog.sizes_by_model if m not in catalog.models)
    if unknown:
        logger.info("Reference models not in the fixed model list: %s", ", ".join(unknown))
    return CatalogLoad(status=CatalogLoadStatus.READY, catalog=catalog, source=str(source))


def catalog_summary(catalog: OptionCatalog) -> Dict[str, object]:
    return {
        "models": len(catalog.models),
        "sizes_by_model": {m: len(sizes) for m, sizes in catalog.sizes_by_model.items()},
        "glass_options": len(catalog.glass_options),
        "jamb_sizes": len(catalog.jamb_sizes),
        "hinge_finishes": len(catalog.hinge_finishes),
        "sill_finishes": len(catalog.sill_finishes),
        "handle_preps": len(catalog.handle_preps),
        "swings": len(catalog.swings),
    }
