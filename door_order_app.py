from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import streamlit as st

from app_settings import Settings, configure_logging, load_settings
from door_catalog import OptionCatalog, dentil_shelf_label
from door_gating import (
    FIELD_LABELS,
    field_choices,
    is_item_complete,
    missing_fields,
    ordered_visible_fields,
)
from order_draft import (
    CUSTOMER_FIELD_LABELS,
    CUSTOMER_FIELDS,
    DoorLineItem,
    OrderDraft,
    add_item,
    can_open_door_configuration,
    is_ready_to_submit,
    missing_customer_fields,
    order_payload,
    set_customer_field,
    set_item_field,
    start_order_draft,
)
from order_pdf import make_order_pdf_bytes, order_pdf_artifact
from order_submission import SubmissionResult, order_items_csv, sink_from_settings, submit_order
from reference_data import CatalogLoad, CatalogLoadStatus, load_option_catalog

logger = logging.getLogger(__name__)

PAGE_CUSTOMER = 1
PAGE_DOORS = 2

_CUSTOMER_PLACEHOLDERS = {
    "name": "Full Name",
    "company": "Company Name",
    "street_address": "Street Address",
    "city": "City",
    "state": "State",
    "zip_code": "ZIP Code",
    "po_number": "Purchase Order Number",
    "email": "Email Address",
}

_FIELD_PLACEHOLDERS = {
    "model": "Select Model",
    "size": "Select Size",
    "glass": "Select Glass Option",
    "jamb": "Select Jamb Size",
    "custom_jamb_spec": "Enter custom jamb size",
    "hinge": "Select Hinge Finish",
    "sill": "Select Sill Finish",
    "handle_prep": "Select Handle Prep",
    "handleset_option": "Select Handleset Option",
    "custom_handle_spec": "Enter custom handle prep details",
    "swing": "Select Door Swing",
    "notes": "Add any special instructions or notes here",
    "dentil_shelf": "Select Dentil Shelf Option",
}


def _customer_key(field_name: str) -> str:
    return f"customer_{field_name}"


def _door_key(item_id: int, field_name: str) -> str:
    return f"door_{item_id}_{field_name}"


def _select_options(current: str, choices: Sequence[str]) -> List[str]:
    """
    Selectbox options: a blank "unset" entry, the catalog choices, and the current value
    when it is no longer among the choices (a stale size after a model change stays visible
    instead of silently showing as unset).
    """
    options = [""] + [c for c in choices if c]
    if current and current not in options:
        options.append(current)
    return options


def _draft() -> OrderDraft:
    draft = st.session_state.get("order_draft")
    if not isinstance(draft, OrderDraft):
        draft = start_order_draft()
        st.session_state["order_draft"] = draft
    return draft


def _init_state() -> None:
    _draft()
    if "page" not in st.session_state:
        st.session_state["page"] = PAGE_CUSTOMER
    if "last_submission" not in st.session_state:
        st.session_state["last_submission"] = None


def _on_customer_change(field_name: str) -> None:
    value = st.session_state.get(_customer_key(field_name))
    st.session_state["order_draft"] = set_customer_field(_draft(), field_name, str(value or ""))


def _on_item_change(item_id: int, field_name: str) -> None:
    value = st.session_state.get(_door_key(item_id, field_name))
    st.session_state["order_draft"] = set_item_field(_draft(), item_id, field_name, str(value or ""))


def _on_add_door() -> None:
    draft = add_item(_draft())
    st.session_state["order_draft"] = draft
    logger.info("Added door %d (order now has %d doors)", draft.items[-1].id, len(draft.items))


def _missing_customer_caption(draft: OrderDraft) -> Optional[str]:
    missing = missing_customer_fields(draft.customer)
    if not missing:
        return None
    # Text inputs commit on Enter or when focus leaves the field.
    return "Still needed (press Enter after typing): " + ", ".join(CUSTOMER_FIELD_LABELS[f] for f in missing)


def _door_status_caption(item: DoorLineItem, catalog: OptionCatalog) -> Optional[str]:
    if is_item_complete(item, catalog):
        return "Complete"
    if not item.model:
        return None
    return "Not yet selected: " + ", ".join(FIELD_LABELS[f] for f in missing_fields(item, catalog))


def _catalog_mtime(source: str) -> float:
    path = Path(source)
    try:
        return path.stat().st_mtime
    except OSError:
        return 0.0


@st.cache_resource(show_spinner=False)
def _load_catalog_cached(source: str, source_mtime: float, timeout_s: float) -> CatalogLoad:
    """
    Cached one-shot catalog load.

    Do NOT call Streamlit UI functions here; `source_mtime` only invalidates the cache
    when the reference file changes.
    """
    _ = source_mtime
    return load_option_catalog(source, timeout_s=timeout_s)


def _catalog_notice(load: CatalogLoad) -> Optional[str]:
    if not load.is_settled:
        return "Loading door options..."
    if load.status == CatalogLoadStatus.FAILED:
        return "Door options could not be loaded; selectors will be empty."
    if load.catalog.is_empty:
        return "The reference file lists no door options; selectors will be empty."
    return None


def _load_catalog(settings: Settings) -> CatalogLoad:
    notice = st.empty()
    load = CatalogLoad.pending(settings.reference_source)
    notice.info(_catalog_notice(load))
    with st.spinner("Loading..."):
        load = _load_catalog_cached(
            settings.reference_source,
            _catalog_mtime(settings.reference_source),
            settings.reference_timeout_s,
        )
    message = _catalog_notice(load)
    if message:
        notice.warning(message)
    else:
        notice.empty()
    return load


def _render_customer_page(draft: OrderDraft) -> None:
    st.subheader("Customer Information")
    cust = draft.customer
    for field_name in CUSTOMER_FIELDS:
        if field_name in ("city", "state"):
            continue
        if field_name == "zip_code":
            col1, col2 = st.columns(2)
            for col, f in ((col1, "city"), (col2, "state")):
                col.text_input(
                    CUSTOMER_FIELD_LABELS[f],
                    value=getattr(cust, f),
                    placeholder=_CUSTOMER_PLACEHOLDERS[f],
                    key=_customer_key(f),
                    on_change=_on_customer_change,
                    args=(f,),
                )
        st.text_input(
            CUSTOMER_FIELD_LABELS[field_name],
            value=getattr(cust, field_name),
            placeholder=_CUSTOMER_PLACEHOLDERS[field_name],
            key=_customer_key(field_name),
            on_change=_on_customer_change,
            args=(field_name,),
        )

    if st.button(
        "Next: Door Configuration",
        disabled=not can_open_door_configuration(draft),
        use_container_width=True,
    ):
        st.session_state["page"] = PAGE_DOORS
        st.rerun()
    missing = _missing_customer_caption(draft)
    if missing:
        st.caption(missing)


def _render_door_field(item_id: int, field_name: str, current: str, choices: Optional[Sequence[str]]) -> None:
    label = FIELD_LABELS[field_name]
    key = _door_key(item_id, field_name)
    placeholder = _FIELD_PLACEHOLDERS.get(field_name, "")
    if choices is None:
        if field_name == "notes":
            st.text_area(
                label,
                value=current,
                placeholder=placeholder,
                key=key,
                height=100,
                on_change=_on_item_change,
                args=(item_id, field_name),
            )
        else:
            st.text_input(
                label,
                value=current,
                placeholder=placeholder,
                key=key,
                on_change=_on_item_change,
                args=(item_id, field_name),
            )
        return

    options = _select_options(current, choices)

    def _fmt(value: str) -> str:
        if not value:
            return placeholder
        if field_name == "dentil_shelf":
            return dentil_shelf_label(value)
        return value

    st.selectbox(
        label,
        options=options,
        index=options.index(current) if current in options else 0,
        format_func=_fmt,
        key=key,
        on_change=_on_item_change,
        args=(item_id, field_name),
    )


def _render_doors_page(draft: OrderDraft, load: CatalogLoad, settings: Settings) -> None:
    st.subheader("Door Configuration")
    catalog: OptionCatalog = load.catalog
    with st.container(border=True):
        st.write(f"**Company:** {draft.customer.company}")
        st.write(f"**PO Number:** {draft.customer.po_number}")

    for item in draft.items:
        st.divider()
        st.markdown(f"### Door {item.id}")
        for field_name in ordered_visible_fields(item, catalog):
            choices = field_choices(item, field_name, catalog)
            _render_door_field(item.id, field_name, getattr(item, field_name), choices)
        caption = _door_status_caption(item, catalog)
        if caption:
            st.caption(caption)

    st.divider()
    st.button("Add Another Door", on_click=_on_add_door, use_container_width=True)

    if st.button("Submit Order", type="primary", disabled=not is_ready_to_submit(draft), use_container_width=True):
        result = submit_order(_draft(), sink_from_settings(settings), catalog_source=load.source)
        st.session_state["last_submission"] = result

    result = st.session_state.get("last_submission")
    if isinstance(result, SubmissionResult):
        if result.ok:
            st.success(f"Order submitted. {result.message}".strip())
        else:
            code = f" (HTTP {result.status_code})" if result.status_code else ""
            st.error(f"Order submission failed{code}: {result.message}")

    _render_downloads(draft, load)

    if st.button("Back to Customer Info", use_container_width=True):
        st.session_state["page"] = PAGE_CUSTOMER
        st.rerun()


def _render_downloads(draft: OrderDraft, load: CatalogLoad) -> None:
    with st.expander("Downloads", expanded=False):
        payload = order_payload(draft, catalog_source=load.source)
        st.download_button(
            "Download order (JSON)",
            data=json.dumps(payload, indent=2),
            file_name="door_order.json",
            mime="application/json",
            use_container_width=True,
        )
        st.download_button(
            "Download doors (CSV)",
            data=order_items_csv(draft),
            file_name="door_order_items.csv",
            mime="text/csv",
            use_container_width=True,
        )
        try:
            pdf_bytes = make_order_pdf_bytes(order_pdf_artifact(draft, load.catalog, catalog_source=load.source))
        except Exception:
            # The form must stay usable even if PDF rendering breaks.
            logger.exception("Order PDF rendering failed")
            st.caption("PDF export is unavailable right now.")
        else:
            st.download_button(
                "Download order (PDF)",
                data=pdf_bytes,
                file_name="door_order.pdf",
                mime="application/pdf",
                use_container_width=True,
            )


def main() -> None:
    st.set_page_config(page_title="Door Order Entry", layout="centered")
    settings = load_settings(st.secrets)
    configure_logging(settings.log_level)

    st.title("Door Order Entry")
    load = _load_catalog(settings)
    if not load.is_settled:
        st.stop()
    _init_state()

    draft = _draft()
    page = int(st.session_state.get("page") or PAGE_CUSTOMER)
    # The door page is only reachable with complete customer info.
    if page == PAGE_DOORS and not can_open_door_configuration(draft):
        page = PAGE_CUSTOMER
        st.session_state["page"] = page

    if page == PAGE_CUSTOMER:
        _render_customer_page(draft)
    else:
        _render_doors_page(draft, load, settings)


if __name__ == "__main__":
    main()
