"""API blueprints for the script manager."""
from backend.api.ai import ai_bp
from backend.api.docs import docs_bp
from backend.api.scripts import scripts_bp

__all__ = ['ai_bp', 'docs_bp', 'scripts_bp']
