from .health_view import health

__all__ = ["health"]
