"""Host integrations for the font optimizer."""
