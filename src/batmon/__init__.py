"""Live battery monitor polling a fast and a slow power source."""
