"""Command-line tools for the KHQR gateway."""
