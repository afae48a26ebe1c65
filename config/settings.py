import os
from dotenv import load_dotenv

# Only load the .env file if we're not on Render (i.e., we are in a local environment)
if os.environ.get("RENDER") != "true":
    load_dotenv()

# Flask Configuration
SECRET_KEY = os.getenv('SECRET_KEY', 'a_very_secret_key_that_should_be_changed')
CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')

# Socket.IO Configuration
SOCKETIO_ASYNC_MODE = os.getenv('SOCKETIO_ASYNC_MODE', 'threading')

# Session lifecycle (seconds)
SESSION_TTL_SECONDS = float(os.getenv('SESSION_TTL_SECONDS', 2 * 60 * 60))
SWEEP_INTERVAL_SECONDS = float(os.getenv('SWEEP_INTERVAL_SECONDS', 5 * 60))
# 0 disables the automatic next round after a summary
SUMMARY_AUTO_CONTINUE_SECONDS = float(os.getenv('SUMMARY_AUTO_CONTINUE_SECONDS', 10))

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()

# Server Configuration
PORT = int(os.getenv('PORT', 4000))
DEBUG = os.environ.get('RENDER', '') != 'true'

# Render Configuration
IS_RENDER = os.environ.get("RENDER", "") == "true"
