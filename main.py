

import uvicorn


def main():
    """Main entry point to run the application."""
    uvicorn.run(
        "todo_api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=3001,
        reload=True,
    )


if __name__ == "__main__":
    main()
