from .logging_service import init_logging

__all__ = ["init_logging"]
