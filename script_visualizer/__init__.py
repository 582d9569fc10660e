"""ScriptVisualizer: turn a narrated script into a board of typed visual cards."""

__version__ = "0.1.0"
