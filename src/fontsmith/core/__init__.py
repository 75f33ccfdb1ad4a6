"""Configuration and error primitives shared by the font optimizer."""
