from lexevo.config.settings import ApiConfig, LexiconConfig, LoggingConfig

__all__ = ["ApiConfig", "LexiconConfig", "LoggingConfig"]
