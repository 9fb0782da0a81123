"""Backend services for the VNPIT calculator."""
