"""RecipeBox: personal recipe manager API backed by a key-value store."""

__version__ = "0.1.0"
