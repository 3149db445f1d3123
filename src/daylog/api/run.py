"""CLI entry point for serving the diary API with uvicorn."""

import uvicorn


def main() -> None:
    """Run the diary server."""
    uvicorn.run("daylog.api.asgi:app", host="127.0.0.1", port=8000)


if __name__ == "__main__":
    main()
