"""Luach — Streamlit launcher. Run with `streamlit run app.py`."""

from dotenv import load_dotenv

load_dotenv()

from luach.app import main  # noqa: E402

main()
