"""Streamlit entry point used by the Streamlit CLI (``streamlit run app/streamlit_app.py``)."""

from __future__ import annotations

from app.ui.main import run_app


def main() -> None:
    run_app()


if __name__ == "__main__":
    main()
