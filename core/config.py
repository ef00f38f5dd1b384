# core/config.py

import os
from dotenv import load_dotenv

load_dotenv()  # ← must run before the values below are read

SERVICE_NAME = "itinerary-generator-microservice"
SERVICE_VERSION = "1.0.0"

# Gemini
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-1.5-flash")
AI_TIMEOUT_S = float(os.getenv("AI_TIMEOUT_S", "15"))

# Server
PORT = int(os.getenv("PORT", "3003"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
