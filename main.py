"""
Root entrypoint for the identity backend:
    uvicorn main:app --reload

Apply migrations first:  alembic upgrade head
"""

from app.main import app  # noqa: F401

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
