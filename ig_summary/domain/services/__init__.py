"""Domain services: resolver, expander, assembler and differ."""
