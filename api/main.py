"""
FastAPI API Service Entry Point

Auxiliary HTTP surface of the seeder; it serves a single greeting route and
does not touch the database.
"""

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

GREETING = "HELLO WORLD!!!"

app = FastAPI(
    title="Event Vendor Seeder API",
    version="1.0.0",
)


@app.get("/hello", response_class=PlainTextResponse)
async def hello() -> str:
    """Fixed greeting, no authentication."""
    return GREETING
