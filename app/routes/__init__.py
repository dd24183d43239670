from .changes import changes_bp

__all__ = ["changes_bp"]
