"""PawCare notifications service package."""
