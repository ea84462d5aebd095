"""Configuration management for the Manual Assistant."""
import os
import logging
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# API Keys
GROQ_API_KEY = os.getenv("GROQ_API_KEY")

# Server Configuration
PORT = int(os.getenv("PORT", "8000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = os.getenv("LOG_FORMAT", "text")  # "text" or "json"

# CORS Configuration
CORS_ORIGINS = os.getenv(
    "CORS_ORIGINS",
    "http://localhost:3000,http://localhost:3001"
).split(",")

# Model Configuration
CHAT_MODEL = os.getenv("CHAT_MODEL", "llama-3.3-70b-versatile")
MAX_OUTPUT_TOKENS = int(os.getenv("MAX_OUTPUT_TOKENS", "4096"))

# Chunking Configuration
CHUNK_SIZE = 500  # characters
CHUNK_OVERLAP = 50  # characters

# Retrieval Configuration
BASELINE_CHARS = 5000  # leading material always sent (TOC, overview)
MAX_CONTEXT_CHARS = 25000

# Retry Configuration
MAX_RETRIES = 2
MAX_RETRY_WAIT_SECONDS = 60
DEFAULT_RETRY_AFTER_SECONDS = 30

# Logging Configuration
logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
