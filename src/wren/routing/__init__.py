"""Routing — ordered route table with an explicit catch-all entry.

Routes are registered during setup and frozen when the app freezes.
"""
