"""
thepaper
Curates a daily tech digest: fetch feeds, filter, score, tag, select, summarize
"""

__version__ = "0.1.0"
