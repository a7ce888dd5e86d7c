"""
Configuration settings for the agents package.
"""

import os

#==============================================================================
# DECK GENERATION MODEL
#==============================================================================

# OpenAI-compatible chat completion endpoint used for deck structure
DECK_MODEL = "deepseek-ai/DeepSeek-V3"
DECK_API_URL = "https://api.hyperbolic.xyz/v1/chat/completions"
DECK_TEMPERATURE = 0.8
DECK_MAX_TOKENS = 3000
DECK_TOP_P = 0.9

# Proxy endpoint (/api/ai) forwards raw messages with these settings
PROXY_TEMPERATURE = 0.7
PROXY_MAX_TOKENS = 2000

# Trending topic headlines
TREND_TEMPERATURE = 0.7
TREND_MAX_TOKENS = 512

#==============================================================================
# IMAGE GENERATION
#==============================================================================

# Images are addressed by URL; the endpoint renders them when the browser loads them
IMAGE_API_URL = "https://image.pollinations.ai/prompt/"

# Issue a GET for every image reference before accepting it
VERIFY_IMAGES = os.getenv('VERIFY_IMAGES', 'false').lower() == 'true'

ICON_SIZE = 256
IMAGE_WIDTH = 1280
IMAGE_HEIGHT = 720

#==============================================================================
# HTTP RETRY DEFAULTS
#==============================================================================

HTTP_MAX_RETRIES = 3
HTTP_TIMEOUT_MS = 30000
HTTP_RETRY_DELAY_MS = 1000

# Chat completions can take minutes for long decks
DECK_TIMEOUT_MS = 300000
