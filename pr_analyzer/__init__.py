"""
PR Analyzer

A small HTTP relay that fetches a GitHub pull request diff and returns
an AI-generated review of the changes.
"""

__version__ = "1.0.0"
__author__ = "PR Analyzer Team"
