from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

_ROOT = Path(__file__).resolve().parents[1]
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

from app_settings import configure_logging, load_settings
from reference_data import CatalogLoadStatus, catalog_summary, load_option_catalog


def _print_catalog_text(load) -> None:
    catalog = load.catalog
    print(f"Source: {load.source}")
    print(f"Status: {load.status.value}")
    if load.error:
        print(f"Error:  {load.error}")
    print(f"Models (fixed list): {len(catalog.models)}")
    print("Sizes by model:")
    for model, sizes in catalog.sizes_by_model.items():
        marker = "" if model in catalog.models else "  (not in fixed model list)"
        print(f"  - {model}: {', '.join(sizes) or '-'}{marker}")
    for label, values in (
        ("Glass options", catalog.glass_options),
        ("Jamb sizes", catalog.jamb_sizes),
        ("Hinge finishes", catalog.hinge_finishes),
        ("Sill finishes", catalog.sill_finishes),
        ("Handle preps", catalog.handle_preps),
        ("Swings", catalog.swings),
    ):
        print(f"{label}: {', '.join(values) or '-'}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Load the door reference CSV and print the derived option catalog.")
    parser.add_argument("--source", default=None, help="CSV path or http(s) URL (default: DOOR_REFERENCE_SOURCE).")
    parser.add_argument("--json", action="store_true", help="Print the catalog as JSON.")
    args = parser.parse_args(argv)

    settings = load_settings()
    configure_logging(settings.log_level)
    source = args.source or settings.reference_source

    load = load_option_catalog(source, timeout_s=settings.reference_timeout_s)
    if args.json:
        catalog = load.catalog
        print(
            json.dumps(
                {
                    "source": load.source,
                    "status": load.status.value,
                    "error": load.error,
                    "summary": catalog_summary(catalog),
                    "sizes_by_model": {m: list(s) for m, s in catalog.sizes_by_model.items()},
                    "glass_options": list(catalog.glass_options),
                    "jamb_sizes": list(catalog.jamb_sizes),
                    "hinge_finishes": list(catalog.hinge_finishes),
                    "sill_finishes": list(catalog.sill_finishes),
                    "handle_preps": list(catalog.handle_preps),
                    "swings": list(catalog.swings),
                },
                indent=2,
            )
        )
    else:
        _print_catalog_text(load)
    return 1 if load.status == CatalogLoadStatus.FAILED else 0


if __name__ == "__main__":
    raise SystemExit(main())
