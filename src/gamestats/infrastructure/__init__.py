"""Infrastructure: content sources, markdown rendering, the content library."""
