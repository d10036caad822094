"""HTTP API layer (FastAPI).

One prompt route (`/aiPrompts` by default) plus health/version endpoints.
The API is intentionally thin: request handling lives in `aiprompts.pipeline`.
"""
