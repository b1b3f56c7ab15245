from .routes import api_bp, files_bp

__all__ = ['api_bp', 'files_bp']
