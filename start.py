#!/usr/bin/env python3
"""
CV Studio Service Entrypoint

Runs the FastAPI app with a single uvicorn process. The AI job queue lives
in process memory, so the API must not be split across several workers:
every worker would get its own queue and its own AI worker.
"""

import os

PORT = os.environ.get("PORT", "8000")

print("=" * 50)
print("CV Studio API (single process)")
print("=" * 50)

cmd = [
    "uvicorn", "backend.api.main:app",
    "--host", "0.0.0.0",
    "--port", PORT,
    "--workers", "1",
]

print(f"Running: {' '.join(cmd)}")
print("=" * 50)

# Replace this process with the actual command
os.execvp(cmd[0], cmd)
