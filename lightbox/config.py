"""Application configuration constants."""

from __future__ import annotations

# Performance
TARGET_FPS = 60
ASYNC_WORKERS = 4
FRAME_FALLBACK_MS = 16  # timer interval when no per-frame callback exists

# Animation durations (milliseconds)
ANIM_DEFAULT_MS = 400
ANIM_FAST_MS = 200      # jQuery 'fast'
ANIM_SLOW_MS = 600      # jQuery 'slow'

# Viewer option defaults
DEFAULT_ALBUM_LABEL = "Image %1 of %2"
DEFAULT_FADE_MS = 600
DEFAULT_IMAGE_FADE_MS = 600
DEFAULT_RESIZE_MS = 700
DEFAULT_POSITION_FROM_TOP = 50

# Viewport fit: space reserved around the image for chrome
FIT_GUTTER_H = 20
FIT_GUTTER_V = 120

# Chrome (pixels)
CONTAINER_PADDING = 4
IMAGE_BORDER = 4
INITIAL_CONTAINER_SIZE = 250
DATA_CONTAINER_HEIGHT = 40
CLOSE_BTN_RADIUS = 14
NAV_ARROW_SIZE = 22
LOADER_RADIUS = 24
CAPTION_FONT_SIZE = 18
NUMBER_FONT_SIZE = 14

# Overlay
OVERLAY_COLOR = (0, 0, 0)
OVERLAY_OPACITY = 0.8
FRAME_COLOR = (255, 255, 255)

# Resting opacity of the prev/next links before hover
NAV_LINK_RESTING_OPACITY = 0.0
NAV_LINK_HOVER_OPACITY = 1.0

# Key bindings (key names, see rl_compat.KEY_NAMES)
KEYS_CLOSE = ("Escape", "x", "o", "c")
KEYS_NEXT = ("ArrowRight", "Right", "n")
KEYS_PREVIOUS = ("ArrowLeft", "Left", "p")

# Mouse buttons, numbered like DOM event.which
MOUSE_LEFT = 1
MOUSE_RIGHT = 3

# Image limits
MAX_FILE_SIZE_MB = 200

# Supported image extensions
IMG_EXTS = frozenset({".png", ".jpg", ".jpeg", ".bmp", ".tga", ".gif", ".qoi"})

# Window
WINDOW_TITLE = "Lightbox"
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 800
