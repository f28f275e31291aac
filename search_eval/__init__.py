"""search-eval - Compare search engines by grading their results with a scoring model."""

__version__ = "0.1.0"
