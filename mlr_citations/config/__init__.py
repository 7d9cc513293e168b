from mlr_citations.config.loader import load_settings

__all__ = ["load_settings"]
