"""Shared test setup."""

import os

# Let pygame initialize without a display or sound card
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("SDL_AUDIODRIVER", "dummy")
