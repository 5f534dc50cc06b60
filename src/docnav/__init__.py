"""Docnav - navigation and content registry for documentation sites."""
