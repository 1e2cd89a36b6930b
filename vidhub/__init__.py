"""VidHub — engagement layer for the video platform."""
