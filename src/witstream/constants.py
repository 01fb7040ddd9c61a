"""Wit.ai API constants."""

# API version sent as the "v" query parameter (dated 2024-03-04)
CURRENT_VERSION = "20240304"

# Maximum length of the text accepted by /message
MAX_TEXT_LENGTH = 280

BASE_URL = "https://api.wit.ai/"
