"""Core configuration, errors, clock and notices for Central.IA."""
