#!/usr/bin/env python3
"""
Streamlit UI for the Crew Graphics Generator
"""

import io
import os
import tempfile
import zipfile
from pathlib import Path
import time

import streamlit as st

from config import (
    DEFAULT_HEIGHT,
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    DEFAULT_WIDTH,
    LOGO_DIR,
    MAX_DIMENSION_PX,
    MAX_INDIVIDUAL_DOWNLOADS,
    PREVIEW_COLUMNS_DESKTOP,
    PREVIEW_COLUMNS_MOBILE,
    PREVIEW_WIDTH_DESKTOP,
    PREVIEW_WIDTH_MOBILE,
    STYLE_OPTIONS,
    ZIP_SPOOL_MAX_BYTES,
)
from data_loaders import CREW_COLUMNS, crew_payloads, load_crews_dataframe
from utils import safe_png_filename

_UI_DIR = Path(__file__).resolve().parent

# Startup timing (logged to stdout for Streamlit Cloud logs)
_UI_T0 = time.perf_counter()
def _ui_log(msg: str) -> None:
    print(f"[ui] +{time.perf_counter() - _UI_T0:.3f}s {msg}", flush=True)

_ui_log("ui.py start")

st.set_page_config(
    page_title="Crew Graphics Generator",
    page_icon="🚣",
    layout="centered"
)

st.markdown(
    """
<style>
  button, input, textarea, select {
    border-radius: 10px !important;
  }
  .main .block-container {
    max-width: 980px;
    padding-top: 1rem;
    padding-bottom: 2.5rem;
  }
  @media (max-width: 640px) {
    .main .block-container {
      padding-left: 0.75rem;
      padding-right: 0.75rem;
    }
  }
</style>
""",
    unsafe_allow_html=True,
)

st.markdown(
    """
<div style="margin-top: 0.25rem; margin-bottom: 0.25rem;">
  <div style="font-size: 1.8rem; font-weight: 750; line-height: 1.15;">
    Crew Graphics Generator
  </div>
  <div style="font-size: 1.05rem; opacity: 0.8; margin-top: 0.2rem;">
    Race-day lineup images for rowing crews
  </div>
</div>
""",
    unsafe_allow_html=True,
)
_ui_log("rendered header")

# Initialize session state
if "crews_df" not in st.session_state:
    st.session_state.crews_df = None
if "selected_crews" not in st.session_state:
    st.session_state.selected_crews = []
if "generated_items" not in st.session_state:
    # For <=10: list of {name, png_bytes, filename}
    st.session_state.generated_items = []
if "generated_zip" not in st.session_state:
    # For >10: {"zip_bytes": bytes, "zip_name": str, "count": int}
    st.session_state.generated_zip = None
if "generation_errors" not in st.session_state:
    st.session_state.generation_errors = []
if "club_presets" not in st.session_state:
    # (base_url, [ClubPreset]) from the last successful "Load presets"
    st.session_state.club_presets = None


def _reset_loaded_data():
    st.session_state.crews_df = None
    st.session_state.selected_crews = []
    st.session_state.generated_items = []
    st.session_state.generated_zip = None
    st.session_state.generation_errors = []


def _show_load_stats(df, source_name: str) -> None:
    stats = getattr(df, "attrs", {}).get("load_stats")
    if stats:
        st.success(
            f"Loaded **{stats.get('loaded_rows', len(df))}** crews from **{source_name}** "
            f"(source rows: {stats.get('source_rows')}, "
            f"skipped missing name: {stats.get('skipped_missing_name', 0)}, "
            f"skipped missing crew: {stats.get('skipped_missing_crew', 0)})."
        )
    else:
        st.success(f"Loaded {len(df)} crews from {source_name}")


mobile_mode = st.checkbox("Mobile-friendly layout", value=False, help="Reduces multi-column sections for small screens.")

st.subheader("Roster")
st.caption(f"Columns: {', '.join(CREW_COLUMNS)}. Crew lists rowers stroke first, separated by `;`.")
with st.form("roster_form", clear_on_submit=False):
    data_file = st.file_uploader("Upload roster (Excel or CSV)", type=["csv", "xlsx"])
    load_uploaded = st.form_submit_button("📥 Load roster")
if load_uploaded:
    if data_file is None:
        st.warning("Please upload a file first.")
    else:
        tmp_path = None
        try:
            # Write to a secure temp file (ignore user-provided filename)
            suffix = ".xlsx" if str(data_file.name).lower().endswith(".xlsx") else ".csv"
            with tempfile.NamedTemporaryFile(prefix="crews_", suffix=suffix, delete=False) as tmp:
                tmp.write(data_file.getbuffer())
                tmp_path = tmp.name
            _reset_loaded_data()
            st.session_state.crews_df = load_crews_dataframe(tmp_path)
            _show_load_stats(st.session_state.crews_df, data_file.name)
        except (ValueError, ImportError, OSError) as e:
            st.error(f"Error reading {data_file.name}: {e}")
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.remove(tmp_path)

default_path = _UI_DIR / "input" / "template_crews.csv"
if default_path.exists():
    with st.expander("Use example roster", expanded=False):
        if st.button(f"📥 Load {default_path.name}"):
            try:
                _reset_loaded_data()
                st.session_state.crews_df = load_crews_dataframe(str(default_path))
                _show_load_stats(st.session_state.crews_df, default_path.name)
            except (ValueError, ImportError, OSError) as e:
                st.error(f"Error loading example roster: {e}")

if st.session_state.crews_df is None:
    st.info("👆 Upload a roster to get started.")
    st.stop()

df = st.session_state.crews_df
st.markdown("---")
st.header("🚣 Select Crews")
st.dataframe(df, use_container_width=True, height=260, hide_index=True)
all_rows = list(range(len(df)))
st.session_state.selected_crews = st.multiselect(
    "Crews to render",
    options=all_rows,
    default=all_rows,
    key=f"crew_select_{len(df)}",
    format_func=lambda i: f"{df.iloc[i]['Name']} ({df.iloc[i]['Boat']})",
)

# Template and styling
from templates import TEMPLATES, list_templates  # noqa: E402

st.markdown("---")
st.header("🎨 Design")
catalog = list_templates()
template_id = st.selectbox(
    "Template",
    options=[t["id"] for t in catalog],
    format_func=lambda tid: f"{TEMPLATES[tid].name} ({TEMPLATES[tid].category})",
)
st.caption(TEMPLATES[template_id].description)
defaults = TEMPLATES[template_id].defaults


def _option(label: str, key: str, current: str) -> str:
    opts = list(STYLE_OPTIONS[key])
    return st.selectbox(label, options=opts, index=opts.index(current), key=f"{template_id}_{key}")


with st.expander("Style options", expanded=False):
    c1, c2 = st.columns([1, 1])
    with c1:
        background = _option("Background", "background", defaults.background)
        name_display = _option("Names", "name_display", defaults.name_display)
        boat_style = _option("Boat", "boat_style", defaults.boat_style)
    with c2:
        text_layout = _option("Header", "text_layout", defaults.text_layout)
        logo_position = _option("Logo position", "logo", defaults.logo)
    d1, d2 = st.columns([1, 1])
    with d1:
        width = st.number_input("Width (px)", min_value=1, max_value=MAX_DIMENSION_PX, value=DEFAULT_WIDTH, step=10)
    with d2:
        height = st.number_input("Height (px)", min_value=1, max_value=MAX_DIMENSION_PX, value=DEFAULT_HEIGHT, step=10)

with st.expander("Club preset (optional)", expanded=False):
    preset_url = st.text_input(
        "Club preset API URL",
        value=os.environ.get("CREW_GRAPHICS_PRESET_URL", ""),
        placeholder="https://example.org/api",
    ).strip()
    if st.button("Load presets", disabled=not preset_url):
        from data_loaders import HttpClubPresetLookup

        try:
            lookup = HttpClubPresetLookup(preset_url)
            st.session_state.club_presets = (preset_url, lookup.list_presets())
            _ui_log(f"loaded {len(st.session_state.club_presets[1])} club presets")
        except (RuntimeError, ValueError) as e:
            st.session_state.club_presets = None
            st.error(f"Could not load club presets: {e}")
    loaded = st.session_state.club_presets
    presets_by_id = {str(p.id): p for p in loaded[1]} if loaded and loaded[0] == preset_url else {}
    preset_id = st.selectbox(
        "Club preset",
        options=[""] + list(presets_by_id),
        format_func=lambda pid: "(none)" if not pid else (
            presets_by_id[pid].club_name + (" (default)" if presets_by_id[pid].is_default else "")
        ),
        disabled=not presets_by_id,
    )
    if preset_id:
        st.caption("Preset colors apply unless custom colors are set below.")

with st.expander("Colors", expanded=False):
    use_custom_colors = st.checkbox("Use custom colors", value=False)
    k1, k2 = st.columns([1, 1])
    with k1:
        primary = st.color_picker("Primary", value=DEFAULT_PRIMARY_COLOR, disabled=not use_custom_colors)
    with k2:
        secondary = st.color_picker("Secondary", value=DEFAULT_SECONDARY_COLOR, disabled=not use_custom_colors)

with st.expander("Club icon (optional)", expanded=False):
    icon_file = st.file_uploader("Upload club icon", type=["png", "jpg", "jpeg", "gif", "webp", "bmp"])
    logo_choices = sorted(p.name for p in LOGO_DIR.glob("*") if p.is_file()) if LOGO_DIR.is_dir() else []
    preset_logo = st.selectbox("…or a stored club logo", options=[""] + logo_choices) if logo_choices else ""

template_config = {
    "background": background,
    "nameDisplay": name_display,
    "boatStyle": boat_style,
    "textLayout": text_layout,
    "logo": logo_position,
    "dimensions": {"width": int(width), "height": int(height)},
}
if use_custom_colors:
    template_config["colors"] = {"primary": primary, "secondary": secondary}

club_icon = None
if icon_file is not None:
    club_icon = {"type": "upload", "fileBytes": bytes(icon_file.getbuffer()), "filename": icon_file.name}
elif preset_logo:
    club_icon = {"type": "preset", "filename": preset_logo}

st.markdown("---")
selected_count = len(st.session_state.selected_crews)
st.info(f"**{selected_count}** crew(s) selected")
st.caption(
    f"Download behavior: up to **{MAX_INDIVIDUAL_DOWNLOADS}** selected → individual PNGs + previews. "
    f"More than **{MAX_INDIVIDUAL_DOWNLOADS}** → one ZIP download."
)

if st.button("🚀 Generate images", type="primary", use_container_width=True):
    if selected_count == 0:
        st.warning("Please select at least one crew")
    else:
        # Import rendering code only when needed (improves Streamlit Cloud startup)
        from errors import CrewImageError
        from generator import CrewImageGenerator
        from repository import DirectoryLogoStore

        from data_loaders import HttpClubPresetLookup

        presets = HttpClubPresetLookup(preset_url) if preset_id else None
        generator = CrewImageGenerator(presets=presets, logos=DirectoryLogoStore(LOGO_DIR))
        crews = list(crew_payloads(df.iloc[st.session_state.selected_crews]))
        total = len(crews)
        st.session_state.generated_items = []
        st.session_state.generated_zip = None
        st.session_state.generation_errors = []

        progress_bar = st.progress(0)
        status_text = st.empty()
        zip_buf = tempfile.SpooledTemporaryFile(max_size=ZIP_SPOOL_MAX_BYTES) if total > MAX_INDIVIDUAL_DOWNLOADS else None
        zf = zipfile.ZipFile(zip_buf, "w", compression=zipfile.ZIP_DEFLATED) if zip_buf is not None else None
        used_names = set()
        try:
            for i, crew in enumerate(crews):
                payload = {"crew": crew, "templateId": template_id, "templateConfig": template_config}
                if preset_id:
                    payload["presetId"] = preset_id
                if club_icon:
                    payload["clubIcon"] = club_icon
                try:
                    image = generator.generate_from_payload(payload)
                except CrewImageError as e:
                    st.session_state.generation_errors.append(f"{crew['name']}: {e.public_message()}")
                    continue
                except RuntimeError as e:
                    # Club preset API failure
                    st.session_state.generation_errors.append(f"{crew['name']}: {e}")
                    continue
                filename = safe_png_filename(crew["name"])
                stem, n = filename[:-4], 1
                while filename in used_names:
                    filename = f"{stem}_{n}.png"
                    n += 1
                used_names.add(filename)
                if zf is not None:
                    zf.writestr(filename, image.data)
                else:
                    st.session_state.generated_items.append(
                        {"name": crew["name"], "png_bytes": image.data, "filename": filename}
                    )
                progress_bar.progress((i + 1) / total)
                status_text.text(f"Prepared {i + 1}/{total}: {crew['name']}")
        finally:
            if zf is not None:
                zf.close()
        progress_bar.empty()
        status_text.empty()
        if zip_buf is not None:
            zip_buf.seek(0)
            st.session_state.generated_zip = {
                "zip_bytes": zip_buf.read(),
                "zip_name": f"crew_images_{template_id}.zip",
                "count": len(used_names),
            }
            zip_buf.close()

for msg in st.session_state.generation_errors:
    st.error(msg)

if st.session_state.generated_zip is not None:
    z = st.session_state.generated_zip
    st.warning(f"More than {MAX_INDIVIDUAL_DOWNLOADS} crews (**{z['count']}**). Download as a single ZIP.")
    st.download_button(
        "⬇️ Download ZIP",
        data=z["zip_bytes"],
        file_name=z["zip_name"],
        mime="application/zip",
        key="dl_zip",
    )
elif st.session_state.generated_items:
    st.success(f"Prepared **{len(st.session_state.generated_items)}** image(s).")
    columns_per_row = PREVIEW_COLUMNS_MOBILE if mobile_mode else PREVIEW_COLUMNS_DESKTOP
    preview_width = PREVIEW_WIDTH_MOBILE if mobile_mode else PREVIEW_WIDTH_DESKTOP
    items = st.session_state.generated_items
    for start in range(0, len(items), columns_per_row):
        row_items = items[start : start + columns_per_row]
        cols = st.columns(columns_per_row)
        for c, it in enumerate(row_items):
            with cols[c]:
                st.image(io.BytesIO(it["png_bytes"]), width=preview_width)
                st.caption(it["name"])
                st.download_button(
                    "Download",
                    data=it["png_bytes"],
                    file_name=it["filename"],
                    mime="image/png",
                    key=f"dl_png_{start + c}_{it['filename']}",
                )

st.markdown("---")
