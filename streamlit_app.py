"""
Streamlit Cloud entrypoint for the crew image generator.

Streamlit Cloud runs `streamlit_app.py` by default. The batch CLI lives in
`app.py` and the operator UI in `ui.py`; this file wires up logging so the
rendering pipeline's stage logs reach the hosted log stream, then runs the UI.
"""

import logging
import os
import time

_T0 = time.perf_counter()


def _log(msg: str) -> None:
    # Streamlit Cloud captures stdout in logs.
    print(f"[startup] +{time.perf_counter() - _T0:.3f}s {msg}", flush=True)


_log("streamlit_app.py start")

# CREW_GRAPHICS_LOG_LEVEL=DEBUG shows every generation stage transition.
logging.basicConfig(
    level=os.environ.get("CREW_GRAPHICS_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

import streamlit as st  # noqa: E402

_log("imported streamlit")

try:
    # Load the local ui.py by path (avoids clashing with any installed "ui" package).
    import importlib.util
    import sys
    from pathlib import Path

    app_dir = Path(__file__).resolve().parent
    if str(app_dir) not in sys.path:
        sys.path.insert(0, str(app_dir))

    ui_path = app_dir / "ui.py"
    if not ui_path.exists():
        raise FileNotFoundError(f"Missing ui.py at {ui_path}")

    ui_spec = importlib.util.spec_from_file_location("crew_graphics_ui", ui_path)
    if ui_spec is None or ui_spec.loader is None:
        raise RuntimeError(f"Could not load {ui_path}")
    module = importlib.util.module_from_spec(ui_spec)
    ui_spec.loader.exec_module(module)
    _log(f"loaded ui from {ui_path}")
except Exception as e:
    # A failed import can leave a blank page; show the exception instead.
    logging.getLogger("crew_graphics").exception("UI failed to start")
    st.error("App failed to start. See details below.")
    st.exception(e)
    _log(f"startup failed: {type(e).__name__}")
