"""Infrastructure layer: definition loading, persistence, workbooks and logging."""
