"""Groups (teams / practice areas) and their membership."""
