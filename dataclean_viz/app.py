# Entry script for `streamlit run`
from dataclean_viz.main import main

main()
