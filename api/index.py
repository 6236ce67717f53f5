"""
Vercel entry point for the AI Ticket Assistant API
"""
import sys
import os

# Add parent directory to path
parent_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if parent_dir not in sys.path:
    sys.path.insert(0, parent_dir)

# Set environment variables for serverless
os.environ.setdefault("ENVIRONMENT", "production")

from mangum import Mangum
from ticket_assistant.main import app

# Lambda handler for the ASGI app; lifespan runs so the database and
# triage provider are initialized on cold start
handler = Mangum(app, lifespan="auto")
