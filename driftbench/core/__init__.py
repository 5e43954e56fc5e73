"""Core infrastructure: typed models, LLM providers and usage tracking."""
