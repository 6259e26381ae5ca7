"""
Sticker Slicer - Web Edition

Run with:
    streamlit run streamlit_app.py
"""

from __future__ import annotations

import time
from dataclasses import replace

import streamlit as st
from PIL import Image

from sticker_slicer.config import SlicerConfig
from sticker_slicer.errors import UnreadableImage
from sticker_slicer.image_io import checkerboard, decode_rgba
from sticker_slicer.packager import archive_bytes, archive_name, build_sticker_set, detect_layout

# -- Page config -------------------------------------------------------
st.set_page_config(
    page_title="Sticker Slicer",
    page_icon=None,
    layout="wide",
    initial_sidebar_state="collapsed",
)

_DEFAULTS = SlicerConfig()

# -- CSS ---------------------------------------------------------------
st.markdown("""
<style>
    .stApp {
        background-color: #faf9f6;
        color: #2a2a2a;
        font-family: 'Inter', 'Helvetica Neue', sans-serif;
    }
    .block-container {
        max-width: 1000px;
        padding-top: 3.5rem;
        padding-bottom: 4rem;
    }
    .gallery-title {
        font-size: 2.4rem;
        font-weight: 300;
        letter-spacing: 0.06em;
        text-align: center;
        border-bottom: 1px solid #1a1a1a;
        padding-bottom: 0.6rem;
        margin-bottom: 0.5rem;
    }
    .gallery-subtitle {
        font-size: 0.8rem;
        font-weight: 300;
        line-height: 1.8;
        margin-bottom: 2.5rem;
    }
    .label-detail {
        font-size: 0.85rem;
        font-style: italic;
        color: #a0a09a;
        text-align: center;
        margin-bottom: 0.8rem;
    }
    .stButton > button, .stDownloadButton > button {
        border-radius: 0;
        background: #1a1a1a;
        color: #faf9f6;
    }

    /* Hide streamlit chrome */
    #MainMenu {visibility: hidden;}
    footer {visibility: hidden;}
    header {visibility: hidden;}
</style>
""", unsafe_allow_html=True)


# -- Helpers -----------------------------------------------------------

def _on_checkerboard(pixels) -> Image.Image:
    img = Image.fromarray(pixels).convert("RGBA")
    return Image.alpha_composite(checkerboard(*img.size), img)


def _label(text: str) -> None:
    st.markdown(f'<div class="label-detail">{text}</div>', unsafe_allow_html=True)


# -- Title -------------------------------------------------------------
st.markdown('<div class="gallery-title">Sticker Slicer</div>', unsafe_allow_html=True)
st.markdown(
    '<div class="gallery-subtitle">'
    "Upload a single sheet of sticker artwork laid out on a regular grid. "
    f"The grid is detected from the image size alone; the sheet must split "
    f"evenly into {', '.join(str(c) for c in _DEFAULTS.valid_counts)} stickers. "
    "Every sticker is resized for upload, the first one doubles as the main "
    "and tab icons, and everything is bundled into one ZIP archive."
    "</div>",
    unsafe_allow_html=True,
)

# -- Controls ----------------------------------------------------------
ctrl1, ctrl2 = st.columns(2)
with ctrl1:
    remove_bg = st.checkbox(
        "Remove background", value=_DEFAULTS.remove_background,
        help="Make the colour found in each sticker's top-left corner transparent.",
    )
with ctrl2:
    threshold = st.slider(
        "Background tolerance", 0, 120, int(_DEFAULTS.bg_threshold),
        disabled=not remove_bg,
    )

cfg = replace(_DEFAULTS, remove_background=remove_bg, bg_threshold=float(threshold))

st.markdown("---")

# -- Upload ------------------------------------------------------------
uploaded = st.file_uploader("Select sticker sheet", type=["png", "jpg", "jpeg", "webp"])

# Keep the sheet across reruns so toggling options does not clear it
if uploaded is not None:
    st.session_state.sheet_data = uploaded.getvalue()
    st.session_state.sheet_name = uploaded.name
elif "sheet_data" not in st.session_state:
    st.session_state.sheet_data = None

if st.session_state.sheet_data is not None:
    try:
        source = decode_rgba(st.session_state.sheet_data)
    except UnreadableImage as exc:
        st.error(f"Could not read the uploaded file. {exc}")
        st.stop()
    h, w = source.shape[:2]
    layout = detect_layout(source, cfg)

    if layout is None:
        st.error(
            f"No valid layout found. Image size: {w}x{h}. Resize the sheet so it "
            f"splits evenly into {', '.join(str(c) for c in cfg.valid_counts)} stickers."
        )
        st.stop()

    st.markdown(
        f"**Detected:** {layout.rows} rows × {layout.cols} cols = {layout.count} stickers"
    )

    t0 = time.perf_counter()
    sticker_set = build_sticker_set(source, cfg, layout=layout)
    elapsed = time.perf_counter() - t0

    # Icons
    icon1, icon2, _ = st.columns([2, 1, 3])
    with icon1:
        st.image(_on_checkerboard(sticker_set.main))
        _label(f"main {cfg.main_size[0]}×{cfg.main_size[1]}")
    with icon2:
        st.image(_on_checkerboard(sticker_set.tab))
        _label(f"tab {cfg.tab_size[0]}×{cfg.tab_size[1]}")

    # Sticker grid
    per_row = min(layout.cols, 8)
    for start in range(0, len(sticker_set.stickers), per_row):
        cols = st.columns(per_row)
        for col, tile in zip(cols, sticker_set.stickers[start:start + per_row], strict=False):
            with col:
                st.image(_on_checkerboard(tile.pixels), use_container_width=True)
                _label(f"{tile.index:02d}")

    _, dl_col, _ = st.columns([1, 2, 1])
    with dl_col:
        st.download_button(
            "DOWNLOAD ZIP",
            data=archive_bytes(sticker_set),
            file_name=archive_name(st.session_state.sheet_name, cfg),
            mime="application/zip",
            use_container_width=True,
        )

    m1, m2, m3 = st.columns(3)
    m1.metric("Sheet", f"{w} × {h}")
    m2.metric("Stickers", f"{layout.count}")
    m3.metric("Time", f"{elapsed:.1f} s")

else:
    st.markdown(
        '<p style="color: #bbb; font-size: 1rem; font-style: italic; margin-top: 2rem;">'
        "Select a sticker sheet to begin.</p>",
        unsafe_allow_html=True,
    )
