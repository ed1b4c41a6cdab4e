"""Task and file record clients for the Apper backend SDK."""
