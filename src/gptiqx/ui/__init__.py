"""Streamlit UI for GPTIQX."""

import subprocess
import sys
from pathlib import Path


def run_streamlit_app():
    """Launch the Streamlit app in a subprocess."""
    app_path = Path(__file__).parent / "streamlit_app.py"
    subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)], check=True)
