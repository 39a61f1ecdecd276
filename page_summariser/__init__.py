"""
Page Summariser: bullet-point summaries of web-page text via OpenRouter, with chunking and free-model fallback.
Entry points: page_summariser.factory (wiring), page_summariser.summarize (engine), page_summariser.cli.
"""

__version__ = "0.1.0"
