"""nextforge -- scaffold a Next.js app and generate its components with an LLM."""

__version__ = "1.0.0"
