"""Merge RSS/Atom feed links into a managed markdown section."""
