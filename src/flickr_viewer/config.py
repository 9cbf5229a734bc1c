"""Project-wide configuration."""

import os
from pathlib import Path

from dotenv import load_dotenv

PROJECT_ROOT = Path(os.environ.get("FLICKR_VIEWER_PROJECT_ROOT", Path.cwd()))

load_dotenv(PROJECT_ROOT / ".env")

# Flickr API
FLICKR_API_KEY = os.environ.get("FLICKR_API_KEY", "")
FLICKR_API_BASE = "https://api.flickr.com/services/rest/"
FLICKR_SEARCH_METHOD = "flickr.photos.search"
SEARCH_PER_PAGE = 500

# Thumbnail width in pixels; height follows the source aspect ratio
THUMBNAIL_WIDTH = 250

# Saved images go to the working directory unless overridden
_save_dir = os.environ.get("FLICKR_VIEWER_SAVE_DIR")
SAVE_DIR = Path(_save_dir) if _save_dir else None

# No timeout unless one is configured (seconds)
_timeout = os.environ.get("FLICKR_VIEWER_TIMEOUT")
HTTP_TIMEOUT = float(_timeout) if _timeout else None
