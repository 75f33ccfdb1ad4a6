"""User-facing interfaces for fontsmith."""
