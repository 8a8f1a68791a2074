from .config import ClusterSettings, clear_settings_cache, load_settings, settings_path

__all__ = ["ClusterSettings", "clear_settings_cache", "load_settings", "settings_path"]
