"""Static reference tables (TOML under ``data/``) and their loader."""
