"""Code Explainer - structural analysis of multi-language projects for LLM documentation."""

__version__ = "0.1.0"
