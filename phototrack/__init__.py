"""phototrack: build a GPX track from the geotags embedded in photos."""
