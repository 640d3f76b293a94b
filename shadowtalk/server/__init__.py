"""HTTP API package: FastAPI app and pydantic models.

WHY: Front ends that capture captions and speech in a browser need the
segmenter and scorer without bundling Python. This package exposes them
as a stateless JSON API.

RULES:
- Importing this package requires the fastapi and pydantic dependencies
- The app holds no per-client state
"""
