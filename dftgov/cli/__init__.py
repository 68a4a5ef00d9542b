"""DFT Governor command-line interface."""
