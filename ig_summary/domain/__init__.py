"""Domain layer for IG Summary.

Element resolution, value set expansion, summary assembly and diffing.
Nothing here depends on files, consoles or workbooks.
"""
