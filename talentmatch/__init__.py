"""
talentmatch - rank candidate résumés against job postings.
"""

__version__ = "0.3.0"
