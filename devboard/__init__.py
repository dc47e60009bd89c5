"""DevBoard API: README and portfolio generation over streamed LLM pipelines."""

__version__ = "1.0.0"
