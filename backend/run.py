#!/usr/bin/env python3
"""
Run the DocQuiz API.
Usage: python run.py
"""
import os
import sys

# Ensure this directory (backend) is on path so "app" resolves when run from anywhere
_BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
if _BACKEND_DIR not in sys.path:
    sys.path.insert(0, _BACKEND_DIR)

from dotenv import load_dotenv

load_dotenv()

if __name__ == "__main__":
    import uvicorn

    from app.main import app

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
